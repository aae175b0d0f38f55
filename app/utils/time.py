"""Utility functions for time handling.

All timestamps exposed to clients are UTC. The schedule is evaluated against
local wall-clock time because operators think of watering hours locally.

Control loops never call ``datetime.now()`` or ``time.sleep()`` directly;
they go through a :class:`Clock` so tests can drive them with simulated time.
"""

from __future__ import annotations

import threading
from datetime import datetime, timedelta, timezone
from typing import Protocol

UTC_SECONDS_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def utc_now() -> datetime:
    """Return current UTC time as an aware datetime."""
    return datetime.now(timezone.utc)


def iso_now(*, timespec: str | None = None) -> str:
    """Return current UTC time as an ISO8601 string (timezone-aware)."""
    now = utc_now()
    if timespec:
        return now.isoformat(timespec=timespec)
    return now.isoformat()


def iso_utc_seconds(dt: datetime) -> str:
    """Format a datetime as second-precision UTC, e.g. ``2016-04-04T07:07:09Z``."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).strftime(UTC_SECONDS_FORMAT)


def top_of_hour(dt: datetime) -> datetime:
    """Truncate a datetime to the start of its hour."""
    return dt.replace(minute=0, second=0, microsecond=0)


def seconds_until_next_hour(dt: datetime) -> float:
    """Distance in seconds from ``dt`` to the next top of the hour."""
    return (top_of_hour(dt) + timedelta(hours=1) - dt).total_seconds()


class Clock(Protocol):
    """Source of "now" and of interruptible sleeps for the control loops."""

    def now(self) -> datetime:
        """Current local wall-clock time (timezone-aware)."""
        ...

    def utc_now(self) -> datetime:
        ...

    def wait(self, stop_event: threading.Event, seconds: float) -> bool:
        """Sleep up to ``seconds``; return True if ``stop_event`` was set."""
        ...


class SystemClock:
    """Real wall-clock time."""

    def now(self) -> datetime:
        return datetime.now().astimezone()

    def utc_now(self) -> datetime:
        return utc_now()

    def wait(self, stop_event: threading.Event, seconds: float) -> bool:
        return stop_event.wait(max(0.0, seconds))
