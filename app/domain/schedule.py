"""
Watering schedule entity.

Holds 24 hourly slots, each saying whether the pump should be switched on
or off at the top of that hour. The schedule is read by the schedule engine
every tick and read/written by the HTTP control surface, so every access
goes through one lock and multi-slot updates are applied as a unit.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Mapping

from app.domain.exceptions import ValidationError
from app.utils.concurrency import synchronized

HOURS_PER_DAY = 24


@dataclass(frozen=True)
class ScheduleSlot:
    """On/off intent for one hour of the day."""

    on: bool = False
    off: bool = False

    @property
    def is_empty(self) -> bool:
        return not (self.on or self.off)

    def to_dict(self) -> dict[str, int]:
        return {"on": 1 if self.on else 0, "off": 1 if self.off else 0}


def _check_hour(hour: int) -> int:
    if isinstance(hour, bool) or not isinstance(hour, int) or not 0 <= hour < HOURS_PER_DAY:
        raise ValidationError(f"Hour must be an integer between 0 and 23 (got {hour!r})")
    return hour


class WateringSchedule:
    """Fixed-size, thread-safe array of 24 :class:`ScheduleSlot`."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._slots: list[ScheduleSlot] = [ScheduleSlot() for _ in range(HOURS_PER_DAY)]

    def __len__(self) -> int:
        return HOURS_PER_DAY

    @synchronized
    def set(self, hour: int, on: bool, off: bool) -> None:
        """Set the slot for a single hour."""
        self._slots[_check_hour(hour)] = ScheduleSlot(on=bool(on), off=bool(off))

    @synchronized
    def get(self, hour: int) -> ScheduleSlot:
        return self._slots[_check_hour(hour)]

    def apply(self, updates: Mapping[int, ScheduleSlot]) -> None:
        """Replace several slots at once.

        Every hour is validated before anything is written; hours absent
        from ``updates`` keep their current slot.
        """
        checked = {_check_hour(hour): slot for hour, slot in updates.items()}
        with self._lock:
            for hour, slot in checked.items():
                self._slots[hour] = slot

    @synchronized
    def snapshot(self) -> list[ScheduleSlot]:
        return list(self._slots)

    def to_dict(self) -> dict[str, dict[str, int]]:
        """Render as ``{"0": {"on": 0|1, "off": 0|1}, ...}``."""
        return {str(hour): slot.to_dict() for hour, slot in enumerate(self.snapshot())}
