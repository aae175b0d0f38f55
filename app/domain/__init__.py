"""
Domain Package
==============
Entities shared between the control loops and the HTTP surface.

- WateringSchedule: 24 hourly on/off slots
- MoistureHistory: newest-first buffer of the last moisture readings
"""

from .moisture import MoistureHistory, MoistureSample
from .schedule import HOURS_PER_DAY, ScheduleSlot, WateringSchedule

__all__ = [
    "HOURS_PER_DAY",
    "MoistureHistory",
    "MoistureSample",
    "ScheduleSlot",
    "WateringSchedule",
]
