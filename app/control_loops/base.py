"""
PeriodicLoop: shared lifecycle for the controller's background loops.

Each loop owns one daemon thread that calls ``tick()`` and then waits
``interval`` seconds on the injected clock. A failing tick is logged and
the loop carries on at the next interval; only ``stop()`` ends it.
"""

import logging
import threading
from typing import Any

from app.domain.exceptions import SensorIOError
from app.utils.time import Clock, SystemClock

logger = logging.getLogger(__name__)


class PeriodicLoop:
    """Base class for MoistureSampler, FlowMonitor and ScheduleEngine."""

    name = "PeriodicLoop"

    def __init__(self, interval: float, clock: Clock | None = None):
        self.interval = max(0.1, float(interval))
        self.clock = clock or SystemClock()
        self._stop_event = threading.Event()
        self._worker_thread: threading.Thread | None = None
        self._state_lock = threading.Lock()
        self.tick_count = 0
        self.error_count = 0
        self.last_error: str | None = None

    # -------------------------------------------------------------------------
    # Lifecycle Management
    # -------------------------------------------------------------------------

    @property
    def is_running(self) -> bool:
        thread = self._worker_thread
        return thread is not None and thread.is_alive()

    def start(self) -> None:
        """Starts the loop thread; no-op if already running."""
        with self._state_lock:
            if self.is_running:
                return
            self._stop_event.clear()
            self._worker_thread = threading.Thread(target=self._run, name=self.name, daemon=True)
            self._worker_thread.start()
        logger.info("Started %s (interval=%ss)", self.name, self.interval)

    def stop(self, timeout: float = 5.0) -> None:
        """Signals the loop to stop and joins the thread. Safe before start()."""
        self._stop_event.set()
        with self._state_lock:
            thread, self._worker_thread = self._worker_thread, None
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=timeout)
            if thread.is_alive():
                logger.warning("%s did not stop within %.1fs", self.name, timeout)
            else:
                logger.info("%s stopped", self.name)

    # -------------------------------------------------------------------------
    # Core Logic
    # -------------------------------------------------------------------------

    def _run(self) -> None:
        while not self._stop_event.is_set():
            self.run_once()
            if self.clock.wait(self._stop_event, self.interval):
                break

    def run_once(self) -> None:
        """Runs one tick with failure containment."""
        self.tick_count += 1
        try:
            self.tick()
        except SensorIOError as exc:
            self._record_error(exc)
            logger.warning("%s skipped tick: %s", self.name, exc)
        except Exception as exc:
            self._record_error(exc)
            logger.exception("%s tick failed: %s", self.name, exc)

    def tick(self) -> None:
        raise NotImplementedError("Subclasses must implement tick()")

    def _record_error(self, exc: Exception) -> None:
        self.error_count += 1
        self.last_error = str(exc)

    def get_service_status(self) -> dict[str, Any]:
        return {
            "is_running": self.is_running,
            "interval": self.interval,
            "ticks": self.tick_count,
            "errors": self.error_count,
            "last_error": self.last_error,
        }
