"""Tests for DeviceController pump state transitions."""

import threading

import pytest

from app.domain.exceptions import DeviceIOError
from app.enums.events import DeviceEvent, TransitionSource
from app.hardware.actuators.relays import SimulatedRelay
from app.services.hardware.device_controller import DeviceController


@pytest.fixture()
def relay():
    return SimulatedRelay("pump")


@pytest.fixture()
def controller(relay, mock_event_bus, clock):
    return DeviceController(relay, mock_event_bus, clock)


def test_starts_off_with_relay_driven_low(controller, relay, mock_event_bus):
    assert controller.is_off()
    assert not controller.is_on()
    assert relay.writes == [False]
    mock_event_bus.publish.assert_not_called()


def test_turn_on_drives_relay_and_publishes_once(controller, relay, mock_event_bus):
    changed = controller.turn_on(TransitionSource.SCHEDULE)

    assert changed is True
    assert controller.is_on()
    assert relay.is_high
    mock_event_bus.publish.assert_called_once()
    event, payload = mock_event_bus.publish.call_args.args
    assert event == DeviceEvent.PUMP_STATE_CHANGED
    assert payload.state == "on"
    assert payload.source == "schedule"
    assert payload.timestamp == "2026-10-19T08:59:58Z"


def test_repeated_requests_are_debounced(controller, relay, mock_event_bus):
    controller.turn_on()
    assert controller.turn_on() is False
    assert controller.turn_on() is False

    assert relay.writes == [False, True]
    assert mock_event_bus.publish.call_count == 1


def test_turn_off_when_already_off_is_noop(controller, relay, mock_event_bus):
    assert controller.turn_off() is False

    assert relay.writes == [False]
    mock_event_bus.publish.assert_not_called()


def test_on_off_on_emits_three_events(controller, mock_event_bus):
    controller.turn_on()
    controller.turn_off()
    controller.turn_on()

    states = [call.args[1].state for call in mock_event_bus.publish.call_args_list]
    assert states == ["on", "off", "on"]


def test_relay_failure_leaves_state_unchanged(controller, relay, mock_event_bus):
    relay.fail_writes = True

    with pytest.raises(DeviceIOError):
        controller.turn_on()

    assert controller.is_off()
    mock_event_bus.publish.assert_not_called()

    relay.fail_writes = False
    assert controller.turn_on() is True


def test_status_reports_last_change(controller, clock):
    assert controller.status() == {"pump": "off", "last_changed": None}

    clock.advance(2)
    controller.turn_on()

    assert controller.status() == {"pump": "on", "last_changed": "2026-10-19T09:00:00Z"}


def test_concurrent_requests_serialize_transitions(controller, relay, mock_event_bus):
    start = threading.Barrier(6)

    def hammer(on):
        start.wait()
        for _ in range(200):
            if on:
                controller.turn_on()
            else:
                controller.turn_off()

    threads = [threading.Thread(target=hammer, args=(index % 2 == 0,)) for index in range(6)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    writes = relay.writes
    assert all(previous != current for previous, current in zip(writes, writes[1:]))
    assert mock_event_bus.publish.call_count == len(writes) - 1
    assert controller.is_off() == (not controller.is_on())
    assert relay.is_high == controller.is_on()
