"""Tests for the PeriodicLoop lifecycle."""

import threading
import time

from app.control_loops.base import PeriodicLoop
from app.utils.time import SystemClock


class CountingLoop(PeriodicLoop):
    name = "CountingLoop"

    def __init__(self, interval=0.1, clock=None, fail=False):
        super().__init__(interval, clock)
        self.ticked = threading.Event()
        self.fail = fail

    def tick(self):
        self.ticked.set()
        if self.fail:
            raise RuntimeError("boom")


def test_interval_has_floor():
    assert CountingLoop(interval=0).interval == 0.1


def test_stop_before_start_is_safe():
    loop = CountingLoop()

    loop.stop()

    assert not loop.is_running


def test_start_runs_ticks_until_stopped():
    loop = CountingLoop(clock=SystemClock())

    loop.start()
    loop.start()
    assert loop.ticked.wait(2.0)
    loop.stop()

    assert not loop.is_running
    assert loop.tick_count >= 1


def test_tick_failure_does_not_stop_loop():
    loop = CountingLoop(clock=SystemClock(), fail=True)

    loop.start()
    deadline = time.monotonic() + 2.0
    while loop.error_count < 2 and time.monotonic() < deadline:
        time.sleep(0.05)
    loop.stop()

    assert loop.error_count >= 2
    assert loop.last_error == "boom"


def test_run_uses_clock_wait(clock):
    loop = CountingLoop(interval=2.0, clock=clock)

    def stop_after_three(stop_event, seconds):
        clock.waits.append(seconds)
        if len(clock.waits) == 3:
            stop_event.set()
        return stop_event.is_set()

    clock.wait = stop_after_three
    loop._run()

    assert loop.tick_count == 3
    assert clock.waits == [2.0, 2.0, 2.0]
