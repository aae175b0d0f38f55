"""
Pump relay drivers
"""

from .gpio_relay import GPIORelay
from .relay_base import RelayBase
from .simulated_relay import SimulatedRelay

__all__ = [
    "GPIORelay",
    "RelayBase",
    "SimulatedRelay",
]
