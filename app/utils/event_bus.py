"""
EventBus: hands controller side effects to a small pool of worker threads.

- Topics are the str-Enums in ``app.enums.events``.
- Publishers pass pydantic models from ``app.schemas.events``; subscribers
  get the ``model_dump()`` dict.
- Callbacks never run on the publisher's thread, so an SMS gateway or a
  datastore that hangs cannot hold up a control loop.
- The queue is bounded. When it is full the event is dropped and counted.
"""

import logging
import threading
import time
from collections import Counter, defaultdict
from dataclasses import asdict, is_dataclass
from enum import Enum
from queue import Empty, Full, Queue
from typing import Any, Callable, Dict, Hashable

from pydantic import BaseModel

logger = logging.getLogger(__name__)

# At most one drop summary per interval, and only once enough have piled up
DROP_SUMMARY_EVERY = 10
DROP_SUMMARY_MIN_INTERVAL = 60.0

_STOP = object()

Callback = Callable[[Any], None]


def _as_plain(data: Any) -> Any:
    if isinstance(data, BaseModel):
        return data.model_dump()
    if is_dataclass(data) and not isinstance(data, type):
        return asdict(data)
    return data


def _topic(event_name: Enum | str) -> str:
    return event_name.value if isinstance(event_name, Enum) else event_name


class EventBus:
    """Topic-based publish/subscribe owned by one WateringContext."""

    def __init__(self, queue_size: int = 256, worker_count: int = 2) -> None:
        self.subscribers: Dict[Hashable, list[Callback]] = defaultdict(list)
        self.lock = threading.Lock()
        self._queue_size = max(1, queue_size)
        self._queue: Queue = Queue(maxsize=self._queue_size)
        self._worker_count = max(1, worker_count)
        self._workers: list[threading.Thread] = []
        self._running = False
        self._dropped = Counter()
        self._unreported_drops = 0
        self._last_drop_summary = 0.0

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Start the worker threads. A second call does nothing."""
        with self.lock:
            if self._running:
                return
            self._workers = [
                threading.Thread(target=self._work, name=f"EventBus-{index}", daemon=True)
                for index in range(self._worker_count)
            ]
            for worker in self._workers:
                worker.start()
            self._running = True
        logger.info("EventBus started (%d workers, queue %d)", self._worker_count, self._queue_size)

    def shutdown(self, timeout: float = 5.0) -> None:
        """Let the workers finish what is queued, then join them."""
        with self.lock:
            if not self._running:
                return
            workers, self._running = list(self._workers), False
        for _ in workers:
            self._queue.put(_STOP)
        deadline = time.monotonic() + timeout
        for worker in workers:
            worker.join(timeout=max(0.0, deadline - time.monotonic()))
        logger.info("EventBus stopped")

    # ------------------------------------------------------------------
    # Publish / subscribe
    # ------------------------------------------------------------------

    def subscribe(self, event_name: Enum | str, callback: Callback) -> Callable[[], None]:
        """
        Register ``callback`` for a topic.

        Returns:
            A function that removes the subscription; calling it twice is harmless.
        """
        topic = _topic(event_name)
        with self.lock:
            self.subscribers[topic].append(callback)

        def unsubscribe() -> None:
            with self.lock:
                callbacks = self.subscribers.get(topic, [])
                if callback in callbacks:
                    callbacks.remove(callback)

        return unsubscribe

    def publish(self, event_name: Enum | str, data: Any | None = None) -> None:
        """Queue ``data`` for every subscriber of the topic without blocking."""
        topic = _topic(event_name)
        payload = _as_plain(data)
        with self.lock:
            callbacks = list(self.subscribers.get(topic, []))
        for callback in callbacks:
            try:
                self._queue.put_nowait((topic, callback, payload))
            except Full:
                self._count_drop(topic)

    # ------------------------------------------------------------------
    # Delivery
    # ------------------------------------------------------------------

    def _deliver(self, item: Any) -> bool:
        topic, callback, payload = item
        try:
            callback(payload)
        except Exception as exc:
            logger.error("Subscriber for %s failed: %s", topic, exc, exc_info=True)
        return True

    def _work(self) -> None:
        while True:
            item = self._queue.get()
            try:
                if item is _STOP:
                    return
                self._deliver(item)
            finally:
                self._queue.task_done()

    def run_pending(self) -> int:
        """Deliver whatever is queued on the calling thread; returns the count.

        For use when no workers are running: tests, and the final flush at
        shutdown.
        """
        delivered = 0
        while True:
            try:
                item = self._queue.get_nowait()
            except Empty:
                return delivered
            try:
                if item is not _STOP:
                    delivered += self._deliver(item)
            finally:
                self._queue.task_done()

    # ------------------------------------------------------------------
    # Back-pressure
    # ------------------------------------------------------------------

    def _count_drop(self, topic: str) -> None:
        self._dropped[topic] += 1
        self._unreported_drops += 1

        now = time.time()
        if self._unreported_drops < DROP_SUMMARY_EVERY or now - self._last_drop_summary < DROP_SUMMARY_MIN_INTERVAL:
            return
        worst = ", ".join(f"{name}:{count}" for name, count in self._dropped.most_common(5))
        logger.warning(
            "EventBus queue full (size %d): %d dropped since last report, %d total [%s]. "
            "Raise WATERING_EVENTBUS_QUEUE_SIZE if this persists.",
            self._queue_size,
            self._unreported_drops,
            sum(self._dropped.values()),
            worst,
        )
        self._unreported_drops = 0
        self._last_drop_summary = now

    def get_metrics(self) -> Dict[str, Any]:
        """Counters for the status endpoint."""
        with self.lock:
            subscribers = sum(len(callbacks) for callbacks in self.subscribers.values())
        return {
            "queue_depth": self._queue.qsize(),
            "queue_size": self._queue_size,
            "dropped_events": sum(self._dropped.values()),
            "subscribers": subscribers,
        }
