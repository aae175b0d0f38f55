"""
Shared test fixtures for the watering system test suite.

Provides:
- FakeClock for driving the control loops through simulated time
- AppConfig built from a clean environment with the simulated backend
- Simulated hardware and a WateringContext wired to it
- Flask app / client fixtures around that context

Usage:
    def test_example(context, clock):
        context.schedule.set(9, True, False)
        clock.set(datetime(2026, 1, 1, 9, 0, 1, tzinfo=timezone.utc))
        context.schedule_engine.run_once()
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

from app import create_app
from app.config import AppConfig
from app.hardware.bundle import HardwareBundle
from app.services.container import WateringContext
from app.utils.event_bus import EventBus

# ---------------------------------------------------------------------------
# Logging, keep test output clean
# ---------------------------------------------------------------------------
logging.getLogger("app").setLevel(logging.WARNING)

_ENV_VARS = (
    "TWILIO_SID",
    "TWILIO_TOKEN",
    "TWILIO_TO",
    "TWILIO_FROM",
    "WATERING_ENABLE_MQTT",
    "WATERING_DATASTORE_URL",
    "WATERING_DATASTORE_TOKEN",
    "WATERING_STRICT_SCHEDULE",
    "WATERING_ENV",
    "WATERING_DEBUG",
)


class FakeClock:
    """Simulated clock: time only moves when a test (or a loop's wait) moves it."""

    def __init__(self, start: datetime):
        self.current = start
        self.waits: list[float] = []

    def now(self) -> datetime:
        return self.current

    def utc_now(self) -> datetime:
        return self.current.astimezone(timezone.utc)

    def set(self, value: datetime) -> None:
        self.current = value

    def advance(self, seconds: float) -> None:
        self.current += timedelta(seconds=seconds)

    def wait(self, stop_event: threading.Event, seconds: float) -> bool:
        self.waits.append(seconds)
        self.advance(seconds)
        return stop_event.is_set()


# ========================== Clock / Config Fixtures ========================


@pytest.fixture()
def clock():
    return FakeClock(datetime(2026, 10, 19, 8, 59, 58, tzinfo=timezone.utc))


@pytest.fixture()
def config(monkeypatch):
    """AppConfig from a clean environment: simulated hardware, no SMS, no MQTT."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("WATERING_HARDWARE", "simulated")
    monkeypatch.setenv("WATERING_LOG_PATH", "")
    return AppConfig()


# ========================== Mock Service Fixtures ==========================


@pytest.fixture()
def mock_event_bus():
    """Mock EventBus that records publish calls."""
    bus = MagicMock()
    bus.publish = MagicMock()
    bus.subscribe = MagicMock()
    return bus


@pytest.fixture()
def event_bus():
    """Real EventBus with no workers started; deliver with run_pending()."""
    return EventBus(queue_size=64, worker_count=1)


# ========================== Hardware / Context Fixtures ====================


@pytest.fixture()
def hardware():
    bundle = HardwareBundle.simulated()
    yield bundle
    bundle.close()


@pytest.fixture()
def context(config, hardware, clock, event_bus):
    """WateringContext on simulated hardware; loops are built but not started."""
    ctx = WateringContext.build(config, hardware, clock=clock, event_bus=event_bus)
    yield ctx
    ctx.shutdown()


@pytest.fixture()
def app(context):
    flask_app = create_app(context=context)
    flask_app.config["TESTING"] = True
    yield flask_app


@pytest.fixture()
def client(app):
    return app.test_client()
