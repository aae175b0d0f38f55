"""Tests for the 24-slot WateringSchedule entity."""

import threading

import pytest

from app.domain.exceptions import ValidationError
from app.domain.schedule import HOURS_PER_DAY, ScheduleSlot, WateringSchedule


def test_new_schedule_has_24_empty_slots():
    schedule = WateringSchedule()

    assert len(schedule) == HOURS_PER_DAY
    assert all(slot.is_empty for slot in schedule.snapshot())


def test_set_and_get_single_hour():
    schedule = WateringSchedule()

    schedule.set(9, True, False)

    assert schedule.get(9) == ScheduleSlot(on=True, off=False)
    assert schedule.get(10).is_empty


@pytest.mark.parametrize("hour", [-1, 24, 100, "3", 2.0, True])
def test_invalid_hour_rejected(hour):
    schedule = WateringSchedule()

    with pytest.raises(ValidationError):
        schedule.set(hour, True, False)


def test_to_dict_renders_zero_one_flags():
    schedule = WateringSchedule()
    schedule.set(0, True, False)
    schedule.set(23, False, True)

    rendered = schedule.to_dict()

    assert list(rendered.keys()) == [str(h) for h in range(24)]
    assert rendered["0"] == {"on": 1, "off": 0}
    assert rendered["23"] == {"on": 0, "off": 1}
    assert rendered["12"] == {"on": 0, "off": 0}


def test_apply_keeps_absent_hours():
    schedule = WateringSchedule()
    schedule.set(5, True, False)

    schedule.apply({6: ScheduleSlot(off=True)})

    assert schedule.get(5).on
    assert schedule.get(6).off


def test_apply_with_bad_hour_writes_nothing():
    schedule = WateringSchedule()

    with pytest.raises(ValidationError):
        schedule.apply({1: ScheduleSlot(on=True), 99: ScheduleSlot(on=True)})

    assert schedule.get(1).is_empty


def test_snapshot_is_a_copy():
    schedule = WateringSchedule()
    snapshot = schedule.snapshot()

    schedule.set(3, True, False)

    assert snapshot[3].is_empty


def test_concurrent_writers_do_not_corrupt_slots():
    schedule = WateringSchedule()

    def writer(on):
        for _ in range(200):
            schedule.apply({hour: ScheduleSlot(on=on, off=not on) for hour in range(24)})

    threads = [threading.Thread(target=writer, args=(flag,)) for flag in (True, False)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    slots = schedule.snapshot()
    assert len(slots) == 24
    # One apply wins as a whole
    assert len({slot for slot in slots}) == 1
