"""Tests for schedule payload validation."""

import logging

import pytest

from app.domain.exceptions import MalformedRequestError, SchemaMismatchError
from app.domain.schedule import ScheduleSlot
from app.schemas.schedule import parse_schedule_payload


def _full_payload(on=0, off=0):
    return {str(hour): {"on": on, "off": off} for hour in range(24)}


def test_full_payload_parses_every_hour():
    payload = _full_payload()
    payload["9"] = {"on": 1, "off": 0}

    slots = parse_schedule_payload(payload)

    assert len(slots) == 24
    assert slots[9] == ScheduleSlot(on=True, off=False)


def test_booleans_are_accepted():
    slots = parse_schedule_payload({"3": {"on": True, "off": False}})

    assert slots == {3: ScheduleSlot(on=True, off=False)}


def test_short_payload_is_applied_with_warning(caplog):
    payload = _full_payload()
    del payload["23"]

    with caplog.at_level(logging.WARNING, logger="app.schemas.schedule"):
        slots = parse_schedule_payload(payload)

    assert len(slots) == 23
    assert "expected 24 entries, got 23" in caplog.text


def test_short_payload_rejected_in_strict_mode():
    payload = _full_payload()
    del payload["0"]

    with pytest.raises(SchemaMismatchError):
        parse_schedule_payload(payload, strict=True)


def test_unknown_hour_keys_are_skipped():
    slots = parse_schedule_payload({"24": {"on": 1, "off": 0}, "noon": {"on": 1, "off": 0}, "1": {"on": 0, "off": 1}})

    assert slots == {1: ScheduleSlot(on=False, off=True)}


@pytest.mark.parametrize("body", [[], "schedule", 3, None])
def test_non_object_body_rejected(body):
    with pytest.raises(MalformedRequestError):
        parse_schedule_payload(body)


@pytest.mark.parametrize("entry", [{"on": 2, "off": 0}, {"on": "yes", "off": 0}, {"on": 1}, "on"])
def test_bad_entry_rejected(entry):
    payload = _full_payload()
    payload["5"] = entry

    with pytest.raises(MalformedRequestError) as exc_info:
        parse_schedule_payload(payload)

    assert exc_info.value.detail["hour"] == 5


@pytest.mark.parametrize("key", ["²", "٣", "３", "-1", " 3"])
def test_non_ascii_or_signed_hour_keys_are_skipped(key):
    slots = parse_schedule_payload({key: {"on": 1, "off": 0}, "4": {"on": 0, "off": 1}})

    assert slots == {4: ScheduleSlot(on=False, off=True)}
