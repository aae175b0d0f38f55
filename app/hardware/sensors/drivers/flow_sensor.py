"""
Internal hardware driver for a hall-effect water flow meter (pulse output).
This module should only be used by the hardware bundle, not directly by application code.
"""

import logging
import threading
import time

from app.domain.exceptions import DeviceError

from .base import BaseSensorDriver

logger = logging.getLogger(__name__)

# Pulse frequency (Hz) = 7.5 * flow rate (L/min) for the common YF-S201 style meter
PULSES_PER_LITRE_PER_MINUTE = 7.5


class FlowSensor(BaseSensorDriver):
    """
    Counts rising edges on a GPIO pin and reports the flow rate in L/min
    averaged over the interval since the previous read.
    """

    name = "flow"

    def __init__(self, pin: int, pulses_per_lpm: float = PULSES_PER_LITRE_PER_MINUTE):
        self.pin = pin
        self.pulses_per_lpm = pulses_per_lpm
        self._lock = threading.Lock()
        self._pulses = 0
        self._last_read = time.monotonic()
        self._released = False
        try:
            import RPi.GPIO as GPIO  # type: ignore

            self.GPIO = GPIO
            GPIO.setmode(GPIO.BCM)
            GPIO.setup(pin, GPIO.IN, pull_up_down=GPIO.PUD_UP)
            GPIO.add_event_detect(pin, GPIO.RISING, callback=self._on_pulse)
        except (ImportError, RuntimeError, ValueError) as e:
            raise DeviceError(f"Failed to initialize flow sensor on GPIO {pin}: {e}") from e
        logger.info("Flow sensor counting pulses on GPIO %s", pin)

    def _on_pulse(self, _channel) -> None:
        with self._lock:
            self._pulses += 1

    def read(self) -> int:
        """Flow rate in whole litres per minute since the last read."""
        if self._released:
            raise self._fail(RuntimeError("sensor released"))
        now = time.monotonic()
        with self._lock:
            pulses, self._pulses = self._pulses, 0
            elapsed, self._last_read = now - self._last_read, now
        if elapsed <= 0:
            return 0
        return int((pulses / elapsed) / self.pulses_per_lpm)

    def cleanup(self) -> None:
        if self._released:
            return
        self._released = True
        try:
            self.GPIO.remove_event_detect(self.pin)
            self.GPIO.cleanup(self.pin)
            logger.info("Stopped flow counter on GPIO %s", self.pin)
        except Exception as e:
            logger.error("Error cleaning up flow sensor pin %s: %s", self.pin, e)
