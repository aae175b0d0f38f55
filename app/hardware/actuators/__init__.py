"""
Actuator drivers.

The controller drives exactly one actuator, the water pump relay.
"""

from app.hardware.actuators.relays import GPIORelay, RelayBase, SimulatedRelay

__all__ = ["GPIORelay", "RelayBase", "SimulatedRelay"]
