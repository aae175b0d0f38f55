"""
Moisture history entity.

A bounded, newest-first buffer of soil moisture readings kept for the
dashboard. The sampler thread inserts while request threads render, so
insert-and-evict and reads share one lock.
"""

from __future__ import annotations

import threading
from collections import deque
from dataclasses import dataclass
from typing import Any

from app.utils.concurrency import synchronized

DEFAULT_HISTORY_SIZE = 20


@dataclass(frozen=True)
class MoistureSample:
    value: int
    timestamp: str  # ISO-8601 UTC, second precision

    def to_dict(self) -> dict[str, Any]:
        return {"value": self.value, "timestamp": self.timestamp}


class MoistureHistory:
    """Newest-first ring of :class:`MoistureSample` capped at ``capacity``."""

    def __init__(self, capacity: int = DEFAULT_HISTORY_SIZE) -> None:
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.capacity = capacity
        self._lock = threading.Lock()
        self._samples: deque[MoistureSample] = deque()

    @synchronized
    def add(self, value: int, timestamp: str) -> MoistureSample:
        """Insert a reading at the front, evicting the oldest past capacity."""
        sample = MoistureSample(value=int(value), timestamp=timestamp)
        self._samples.appendleft(sample)
        while len(self._samples) > self.capacity:
            self._samples.pop()
        return sample

    @synchronized
    def items(self) -> list[MoistureSample]:
        return list(self._samples)

    @synchronized
    def latest(self) -> MoistureSample | None:
        return self._samples[0] if self._samples else None

    @synchronized
    def __len__(self) -> int:
        return len(self._samples)
