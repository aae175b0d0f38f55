"""
ScheduleEngine: fires at most one scheduled pump transition per hour.

Each tick looks at local wall-clock time. The engine is "at the hour" only
inside a short window after the top of the hour (``0 < elapsed < window``).
The first tick inside that window consults the slot for the current hour:
``on`` switches the pump on, otherwise ``off`` switches it off. The boundary
that was handled is remembered so a fast poll, or a poll interval close to
the window length, can never fire twice for the same hour.
"""

import logging
from datetime import datetime, timedelta
from typing import Any

from app.control_loops.base import PeriodicLoop
from app.domain.exceptions import DeviceError
from app.domain.schedule import WateringSchedule
from app.enums.events import TransitionSource
from app.services.hardware.device_controller import DeviceController
from app.utils.time import Clock, seconds_until_next_hour, top_of_hour

logger = logging.getLogger(__name__)

DEFAULT_FIRE_WINDOW_SECONDS = 5.0


class ScheduleEngine(PeriodicLoop):
    name = "ScheduleEngine"

    def __init__(
        self,
        schedule: WateringSchedule,
        device: DeviceController,
        *,
        interval: float = 1.0,
        fire_window_seconds: float = DEFAULT_FIRE_WINDOW_SECONDS,
        clock: Clock | None = None,
    ):
        super().__init__(interval, clock)
        self.schedule = schedule
        self.device = device
        self.fire_window = timedelta(seconds=fire_window_seconds)
        self.last_fired_boundary: datetime | None = None
        self.last_action: str | None = None

    def in_fire_window(self, now: datetime) -> bool:
        elapsed = now - top_of_hour(now)
        return timedelta(0) < elapsed < self.fire_window

    def tick(self) -> None:
        now = self.clock.now()
        if not self.in_fire_window(now):
            return

        boundary = top_of_hour(now)
        if boundary == self.last_fired_boundary:
            return
        # Marked before acting: a failed relay write is not retried this hour
        self.last_fired_boundary = boundary

        slot = self.schedule.get(now.hour)
        try:
            if slot.on:
                self.last_action = "on"
                self.device.turn_on(TransitionSource.SCHEDULE)
            elif slot.off:
                self.last_action = "off"
                self.device.turn_off(TransitionSource.SCHEDULE)
            else:
                self.last_action = None
                logger.debug("No scheduled action for hour %d", now.hour)
        except DeviceError as exc:
            logger.error("Scheduled %s at %02d:00 failed: %s", self.last_action, now.hour, exc)

    def seconds_until_next_boundary(self) -> float:
        return seconds_until_next_hour(self.clock.now())

    def get_service_status(self) -> dict[str, Any]:
        status = super().get_service_status()
        status.update(
            {
                "last_fired_boundary": self.last_fired_boundary.isoformat() if self.last_fired_boundary else None,
                "last_action": self.last_action,
                "seconds_until_next_boundary": round(self.seconds_until_next_boundary(), 1),
            }
        )
        return status
