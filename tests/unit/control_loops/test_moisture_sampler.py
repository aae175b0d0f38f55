"""Tests for MoistureSampler."""

from itertools import count

from app.control_loops.moisture_sampler import MoistureSampler
from app.domain.exceptions import SensorIOError
from app.domain.moisture import MoistureHistory
from app.enums.events import SensorEvent


def test_tick_records_timestamped_reading(clock, mock_event_bus):
    history = MoistureHistory()
    sampler = MoistureSampler(lambda: 12345, history, mock_event_bus, clock=clock)

    sampler.run_once()

    sample = history.latest()
    assert sample.value == 12345
    assert sample.timestamp == "2026-10-19T08:59:58Z"
    event, payload = mock_event_bus.publish.call_args.args
    assert event == SensorEvent.MOISTURE_READING
    assert payload.value == 12345


def test_samples_are_newest_first_and_bounded(clock):
    readings = count(1)
    sampler = MoistureSampler(lambda: next(readings), MoistureHistory(capacity=20), clock=clock)

    for _ in range(21):
        sampler.run_once()
        clock.advance(10)

    values = [s.value for s in sampler.samples()]
    assert values == list(range(21, 1, -1))


def test_failed_read_keeps_previous_history(clock):
    history = MoistureHistory()
    history.add(500, "2026-10-19T08:59:48Z")

    def broken():
        raise SensorIOError("ADC not responding")

    sampler = MoistureSampler(broken, history, clock=clock)
    sampler.run_once()

    assert len(history) == 1
    assert sampler.error_count == 1


def test_status_includes_latest_sample(clock):
    sampler = MoistureSampler(lambda: 42, MoistureHistory(), clock=clock)
    sampler.run_once()

    status = sampler.get_service_status()

    assert status["latest"] == {"value": 42, "timestamp": "2026-10-19T08:59:58Z"}
    assert status["samples"] == 1
