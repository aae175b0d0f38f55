"""
Simulated sensors for running the controller without hardware.
"""

import random

from app.hardware.actuators.relays.simulated_relay import SimulatedRelay

from .base import BaseSensorDriver


class SimulatedMoistureSensor(BaseSensorDriver):
    """Random walk around a typical raw ADC reading."""

    name = "moisture"

    def __init__(self, start: int = 12000, step: int = 150, seed: int | None = None):
        self.value = start
        self.step = step
        self._random = random.Random(seed)

    def read(self) -> int:
        self.value = max(0, min(32767, self.value + self._random.randint(-self.step, self.step)))
        return self.value


class SimulatedFlowSensor(BaseSensorDriver):
    """Reports flow that follows the simulated relay, unless ``stuck`` is set."""

    name = "flow"

    def __init__(self, relay: SimulatedRelay, running_rate: int = 6):
        self.relay = relay
        self.running_rate = running_rate
        self.stuck: int | None = None

    def read(self) -> int:
        if self.stuck is not None:
            return self.stuck
        return self.running_rate if self.relay.is_high else 0
