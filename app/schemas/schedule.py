"""
Schedule Schemas
================

Pydantic models for the ``/schedule`` payload. The body is parsed into typed
slots before the live schedule is touched, so a bad entry never leaves the
schedule half-updated.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic import ValidationError as PydanticValidationError

from app.domain.exceptions import MalformedRequestError, SchemaMismatchError
from app.domain.schedule import HOURS_PER_DAY, ScheduleSlot

logger = logging.getLogger(__name__)


class ScheduleSlotSchema(BaseModel):
    """One hour of the schedule as sent by clients: ``{"on": 0|1, "off": 0|1}``."""

    model_config = ConfigDict(extra="ignore")

    on: bool
    off: bool

    @field_validator("on", "off", mode="before")
    @classmethod
    def _flag(cls, value: Any) -> bool:
        # Only real booleans or the 0/1 integers the schedule renders
        if isinstance(value, bool):
            return value
        if isinstance(value, int) and value in (0, 1):
            return bool(value)
        raise ValueError("must be true/false or 0/1")

    def to_slot(self) -> ScheduleSlot:
        return ScheduleSlot(on=self.on, off=self.off)


def _parse_hour(key: Any) -> int | None:
    # Only ASCII decimal keys name an hour
    if not isinstance(key, str) or not (key.isascii() and key.isdigit()):
        return None
    hour = int(key)
    return hour if 0 <= hour < HOURS_PER_DAY else None


def parse_schedule_payload(raw: Any, *, strict: bool = False) -> dict[int, ScheduleSlot]:
    """Validate a schedule body and return the slots it sets, keyed by hour.

    Args:
        raw: Decoded JSON body.
        strict: Reject payloads that do not carry exactly 24 entries.

    Raises:
        MalformedRequestError: body is not an object of ``{on, off}`` entries.
        SchemaMismatchError: ``strict`` and the entry count is not 24.
    """
    if not isinstance(raw, dict):
        raise MalformedRequestError("Schedule must be a JSON object keyed by hour")

    if len(raw) != HOURS_PER_DAY:
        if strict:
            raise SchemaMismatchError(
                f"Schedule must contain {HOURS_PER_DAY} entries (got {len(raw)})",
                detail={"entries": len(raw)},
            )
        logger.warning("Invalid schedule data: expected %d entries, got %d", HOURS_PER_DAY, len(raw))

    slots: dict[int, ScheduleSlot] = {}
    for key, value in raw.items():
        hour = _parse_hour(key)
        if hour is None:
            logger.warning("Ignoring schedule entry with unknown hour key %r", key)
            continue
        try:
            slots[hour] = ScheduleSlotSchema.model_validate(value).to_slot()
        except PydanticValidationError as exc:
            raise MalformedRequestError(
                f"Invalid schedule entry for hour {hour}",
                detail={"hour": hour, "errors": [error["msg"] for error in exc.errors()]},
            ) from exc
    return slots
