"""
Internal hardware drivers for sensors.

These drivers talk directly to the flow meter (GPIO pulses) and the soil
moisture probe (ADS1115 over I2C). Application code reaches them through
the hardware bundle, never directly.

Available drivers:
- FlowSensor: pulse-counting water flow meter
- SoilMoistureSensor: analog soil moisture probe
- SimulatedFlowSensor / SimulatedMoistureSensor: in-memory stand-ins
"""

from .base import BaseSensorDriver
from .flow_sensor import FlowSensor
from .simulated import SimulatedFlowSensor, SimulatedMoistureSensor
from .soil_moisture_sensor import SoilMoistureSensor

__all__ = [
    "BaseSensorDriver",
    "FlowSensor",
    "SimulatedFlowSensor",
    "SimulatedMoistureSensor",
    "SoilMoistureSensor",
]
