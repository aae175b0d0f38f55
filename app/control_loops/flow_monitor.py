"""
FlowMonitor: cross-checks the flow meter against the pump state.

A pump that is on with no flow (dry well, blocked line, dead pump) or a
pump that is off while water still flows (stuck valve, leak) is reported as
a flow anomaly. Alerts are rate limited: after one fires, further anomalies
are suppressed until the cooldown has elapsed, and suppression does not
restart the cooldown. The monitor only reports; it never actuates.
"""

import logging
from datetime import datetime, timedelta
from typing import Any, Callable

from app.control_loops.base import PeriodicLoop
from app.enums.events import NotificationEvent
from app.schemas.events import FlowAlertPayload
from app.services.hardware.device_controller import DeviceController
from app.utils.event_bus import EventBus
from app.utils.time import Clock, iso_utc_seconds

logger = logging.getLogger(__name__)

DEFAULT_ALERT_COOLDOWN_SECONDS = 300.0


def classify_flow(pump_on: bool, flow_rate: int) -> str | None:
    """Return the anomaly kind for a pump state / flow pair, or None."""
    if pump_on and flow_rate < 1:
        return "no_flow_while_on"
    if not pump_on and flow_rate > 0:
        return "flow_while_off"
    return None


class FlowMonitor(PeriodicLoop):
    name = "FlowMonitor"

    def __init__(
        self,
        read_flow: Callable[[], int],
        device: DeviceController,
        event_bus: EventBus,
        *,
        interval: float = 2.0,
        cooldown_seconds: float = DEFAULT_ALERT_COOLDOWN_SECONDS,
        clock: Clock | None = None,
    ):
        super().__init__(interval, clock)
        self.read_flow = read_flow
        self.device = device
        self.event_bus = event_bus
        self.cooldown = timedelta(seconds=cooldown_seconds)
        self.last_fired_at: datetime | None = None
        self.last_flow_rate: int | None = None
        self.alerts_fired = 0
        self.alerts_suppressed = 0

    def in_cooldown(self, now: datetime) -> bool:
        return self.last_fired_at is not None and now - self.last_fired_at < self.cooldown

    def tick(self) -> None:
        flow_rate = int(self.read_flow())
        pump_on = self.device.is_on()
        self.last_flow_rate = flow_rate

        kind = classify_flow(pump_on, flow_rate)
        if kind is None:
            return

        now = self.clock.utc_now()
        if self.in_cooldown(now):
            self.alerts_suppressed += 1
            logger.debug("Flow anomaly %s suppressed (cooldown)", kind)
            return

        self.last_fired_at = now
        self.alerts_fired += 1
        logger.warning(
            "watering system alert: %s (pump=%s flow=%s L/min)", kind, "on" if pump_on else "off", flow_rate
        )
        self.event_bus.publish(
            NotificationEvent.FLOW_ANOMALY,
            FlowAlertPayload(kind=kind, flow_rate=flow_rate, pump_on=pump_on, timestamp=iso_utc_seconds(now)),
        )

    def get_service_status(self) -> dict[str, Any]:
        status = super().get_service_status()
        status.update(
            {
                "last_flow_rate": self.last_flow_rate,
                "last_alert_at": iso_utc_seconds(self.last_fired_at) if self.last_fired_at else None,
                "alerts_fired": self.alerts_fired,
                "alerts_suppressed": self.alerts_suppressed,
            }
        )
        return status
