"""
Concurrency utilities.

Provides a `synchronized` decorator that runs a method while holding the
instance's `_lock`. Entities shared between the control loops and the
request threads (pump state, schedule, moisture history) use it so every
read-modify-write sequence is serialized.
"""

from __future__ import annotations

from functools import wraps
from typing import Callable, TypeVar

F = TypeVar("F", bound=Callable)


def synchronized(func: F) -> F:
    """Decorator that acquires `self._lock` around the wrapped method.

    The instance must define `_lock`; use an `RLock` when synchronized
    methods call each other.
    """

    @wraps(func)
    def _wrapped(self, *args, **kwargs):
        with self._lock:
            return func(self, *args, **kwargs)

    return _wrapped  # type: ignore[return-value]
