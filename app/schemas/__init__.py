"""
Schemas Module
==============

Pydantic models for event payloads and the schedule request body.
"""

from app.schemas.events import FlowAlertPayload, MoistureReadingPayload, PumpStatePayload
from app.schemas.schedule import ScheduleSlotSchema, parse_schedule_payload

__all__ = [
    # Event payload schemas
    "FlowAlertPayload",
    "MoistureReadingPayload",
    "PumpStatePayload",
    # Schedule schemas
    "ScheduleSlotSchema",
    "parse_schedule_payload",
]
