"""
Scoped ownership of the pump relay and the two sensors.

``HardwareBundle`` is a context manager: every handle it opened is released
on exit, including when opening a later handle fails half way through.
``close()`` is idempotent so signal handlers, ``atexit`` and the ``with``
block can all call it.
"""

from __future__ import annotations

import logging
import threading
from contextlib import ExitStack
from typing import TYPE_CHECKING

from app.hardware.actuators.relays import GPIORelay, RelayBase, SimulatedRelay
from app.hardware.platform import ensure_supported_platform
from app.hardware.sensors.drivers import (
    BaseSensorDriver,
    FlowSensor,
    SimulatedFlowSensor,
    SimulatedMoistureSensor,
    SoilMoistureSensor,
)

if TYPE_CHECKING:
    from app.config import AppConfig

logger = logging.getLogger(__name__)


class HardwareBundle:
    """The pump relay plus the moisture and flow sensors."""

    def __init__(
        self,
        relay: RelayBase,
        moisture: BaseSensorDriver,
        flow: BaseSensorDriver,
        *,
        platform: str = "unknown",
        exit_stack: ExitStack | None = None,
    ):
        self.relay = relay
        self.moisture = moisture
        self.flow = flow
        self.platform = platform
        self._exit_stack = exit_stack
        self._close_lock = threading.Lock()
        self._closed = False

    @classmethod
    def simulated(cls) -> "HardwareBundle":
        relay = SimulatedRelay("pump")
        return cls(relay, SimulatedMoistureSensor(), SimulatedFlowSensor(relay), platform="simulated")

    @classmethod
    def open(cls, config: "AppConfig") -> "HardwareBundle":
        """
        Detect the platform and open every handle for the configured backend.

        Raises:
            UnsupportedEnvironmentError: Board not supported (nothing opened).
            DeviceError: A driver failed to open (already-opened ones released).
        """
        platform = ensure_supported_platform(config.hardware_backend)
        if config.hardware_backend == "simulated":
            return cls.simulated()

        with ExitStack() as stack:
            relay = GPIORelay("pump", config.pump_pin)
            stack.callback(relay.cleanup)
            flow = FlowSensor(config.flow_pin)
            stack.callback(flow.cleanup)
            moisture = SoilMoistureSensor(config.moisture_channel)
            stack.callback(moisture.cleanup)
            bundle = cls(relay, moisture, flow, platform=platform, exit_stack=stack.pop_all())
        logger.info("Hardware opened on %s", platform)
        return bundle

    def read_moisture(self) -> int:
        return self.moisture.read()

    def read_flow(self) -> int:
        return self.flow.read()

    def close(self) -> None:
        """Release every handle. Safe to call more than once."""
        with self._close_lock:
            if self._closed:
                return
            self._closed = True
        if self._exit_stack is not None:
            self._exit_stack.close()
        else:
            for handle in (self.moisture, self.flow, self.relay):
                try:
                    handle.cleanup()
                except Exception as exc:
                    logger.error("Error releasing %s: %s", type(handle).__name__, exc)
        logger.info("Hardware released")

    @property
    def closed(self) -> bool:
        return self._closed

    def __enter__(self) -> "HardwareBundle":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()
