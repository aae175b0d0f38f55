from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Any

from app.config import AppConfig
from app.control_loops import FlowMonitor, MoistureSampler, ScheduleEngine
from app.domain.exceptions import DeviceError
from app.domain.moisture import MoistureHistory
from app.domain.schedule import WateringSchedule
from app.enums.events import TransitionSource
from app.hardware.bundle import HardwareBundle
from app.services.application.event_log_service import EventLogService
from app.services.application.notifications_service import NotificationsService
from app.services.hardware.device_controller import DeviceController
from app.utils.event_bus import EventBus
from app.utils.time import Clock, SystemClock

logger = logging.getLogger(__name__)


@dataclass
class WateringContext:
    """Every shared entity of the controller, built once and passed by reference."""

    config: AppConfig
    clock: Clock
    hardware: HardwareBundle
    event_bus: EventBus
    device: DeviceController
    schedule: WateringSchedule
    history: MoistureHistory
    moisture_sampler: MoistureSampler
    flow_monitor: FlowMonitor
    schedule_engine: ScheduleEngine
    notifications: NotificationsService
    event_log: EventLogService
    _shutdown_lock: threading.Lock = field(default_factory=threading.Lock, repr=False)
    _shutdown_complete: bool = field(default=False, repr=False)
    _started: bool = field(default=False, repr=False)

    @classmethod
    def build(
        cls,
        config: AppConfig,
        hardware: HardwareBundle,
        *,
        clock: Clock | None = None,
        event_bus: EventBus | None = None,
    ) -> "WateringContext":
        """Construct the context around already-opened hardware.

        Nothing is started; call :meth:`start` to launch the loops.
        """
        logger.info("Building WateringContext...")
        clock = clock or SystemClock()
        event_bus = event_bus or EventBus(config.eventbus_queue_size, config.eventbus_worker_count)

        device = DeviceController(hardware.relay, event_bus, clock)
        schedule = WateringSchedule()
        history = MoistureHistory(config.history_size)

        notifications = NotificationsService(config)
        notifications.register(event_bus)
        event_log = EventLogService(config)
        event_log.register(event_bus)

        context = cls(
            config=config,
            clock=clock,
            hardware=hardware,
            event_bus=event_bus,
            device=device,
            schedule=schedule,
            history=history,
            moisture_sampler=MoistureSampler(
                hardware.read_moisture, history, event_bus, interval=config.moisture_interval, clock=clock
            ),
            flow_monitor=FlowMonitor(
                hardware.read_flow,
                device,
                event_bus,
                interval=config.flow_interval,
                cooldown_seconds=config.alert_cooldown_seconds,
                clock=clock,
            ),
            schedule_engine=ScheduleEngine(
                schedule,
                device,
                interval=config.schedule_interval,
                fire_window_seconds=config.fire_window_seconds,
                clock=clock,
            ),
            notifications=notifications,
            event_log=event_log,
        )
        logger.info("WateringContext built successfully.")
        return context

    @property
    def loops(self) -> tuple:
        return (self.moisture_sampler, self.flow_monitor, self.schedule_engine)

    def start(self) -> None:
        """Connect the event log and start the bus workers and the three loops."""
        if self._started:
            return
        self._started = True
        self.event_log.connect()
        self.event_bus.start()
        for loop in self.loops:
            loop.start()
        logger.info("Watering controller running")

    def shutdown(self) -> None:
        """Stop loops, leave the pump off and release every resource. Idempotent."""
        with self._shutdown_lock:
            if self._shutdown_complete:
                return
            self._shutdown_complete = True

        for loop in self.loops:
            try:
                loop.stop()
            except Exception as e:
                logger.warning(f"Failed to stop {loop.name}: {e}")

        try:
            self.device.turn_off(TransitionSource.SHUTDOWN)
        except DeviceError as e:
            logger.error(f"Could not switch pump off during shutdown: {e}")

        # Deliver the final "off" to the event log before the workers go
        try:
            self.event_bus.shutdown()
            self.event_bus.run_pending()
        except Exception as e:
            logger.warning(f"Failed to stop EventBus: {e}")

        self.event_log.close()
        self.hardware.close()
        logger.info("Watering controller shut down")

    def status(self) -> dict[str, Any]:
        return {
            "device": self.device.status(),
            "moisture": self.moisture_sampler.get_service_status(),
            "flow": self.flow_monitor.get_service_status(),
            "schedule": self.schedule_engine.get_service_status(),
            "notifications": self.notifications.get_status(),
            "event_log": self.event_log.get_status(),
            "event_bus": self.event_bus.get_metrics(),
            "platform": self.hardware.platform,
        }
