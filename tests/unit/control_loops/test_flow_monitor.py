"""Tests for FlowMonitor anomaly detection and alert cooldown."""

from unittest.mock import MagicMock

import pytest

from app.control_loops.flow_monitor import FlowMonitor, classify_flow
from app.domain.exceptions import SensorIOError
from app.enums.events import NotificationEvent


@pytest.mark.parametrize(
    "pump_on,flow,expected",
    [
        (True, 0, "no_flow_while_on"),
        (True, 5, None),
        (False, 0, None),
        (False, 3, "flow_while_off"),
    ],
)
def test_classify_flow(pump_on, flow, expected):
    assert classify_flow(pump_on, flow) == expected


@pytest.fixture()
def device():
    device = MagicMock()
    device.is_on.return_value = True
    return device


@pytest.fixture()
def flow_reading():
    return {"value": 0}


@pytest.fixture()
def monitor(flow_reading, device, mock_event_bus, clock):
    return FlowMonitor(lambda: flow_reading["value"], device, mock_event_bus, interval=2.0, clock=clock)


def _run_for(monitor, clock, seconds, step=2.0):
    elapsed = 0.0
    while elapsed < seconds:
        monitor.run_once()
        clock.advance(step)
        elapsed += step


def test_pump_on_without_flow_alerts_once_per_cooldown(monitor, clock, mock_event_bus):
    # 310s of continuous dry running at a 2s poll
    _run_for(monitor, clock, 310)

    assert mock_event_bus.publish.call_count == 2
    assert monitor.alerts_fired == 2
    assert monitor.alerts_suppressed == 153
    event, payload = mock_event_bus.publish.call_args_list[0].args
    assert event == NotificationEvent.FLOW_ANOMALY
    assert payload.kind == "no_flow_while_on"
    assert payload.pump_on is True


def test_flow_while_pump_off_alerts(monitor, device, flow_reading, mock_event_bus):
    device.is_on.return_value = False
    flow_reading["value"] = 4

    monitor.run_once()

    payload = mock_event_bus.publish.call_args.args[1]
    assert payload.kind == "flow_while_off"
    assert payload.flow_rate == 4


def test_normal_operation_is_silent(monitor, device, flow_reading, mock_event_bus):
    flow_reading["value"] = 6
    monitor.run_once()
    device.is_on.return_value = False
    flow_reading["value"] = 0
    monitor.run_once()

    mock_event_bus.publish.assert_not_called()
    assert monitor.last_flow_rate == 0


def test_suppression_does_not_extend_cooldown(monitor, clock, mock_event_bus):
    monitor.run_once()
    clock.advance(299)
    monitor.run_once()
    assert mock_event_bus.publish.call_count == 1

    clock.advance(1)
    monitor.run_once()

    assert mock_event_bus.publish.call_count == 2


def test_sensor_failure_skips_tick(device, mock_event_bus, clock):
    def broken():
        raise SensorIOError("flow sensor unplugged")

    monitor = FlowMonitor(broken, device, mock_event_bus, clock=clock)
    monitor.run_once()

    assert monitor.error_count == 1
    assert monitor.last_error == "flow sensor unplugged"
    mock_event_bus.publish.assert_not_called()


def test_status_reports_alert_counters(monitor):
    monitor.run_once()

    status = monitor.get_service_status()

    assert status["alerts_fired"] == 1
    assert status["last_alert_at"] == "2026-10-19T08:59:58Z"
