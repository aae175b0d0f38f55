"""
Control Loops Package
=====================

The three periodic loops of the controller, each on its own thread:

    ┌──────────────────┐   ┌──────────────────┐   ┌──────────────────┐
    │ MoistureSampler  │   │   FlowMonitor    │   │  ScheduleEngine  │
    │   every 10 s     │   │   every 2 s      │   │   every 1 s      │
    └────────┬─────────┘   └────────┬─────────┘   └────────┬─────────┘
             │                      │ reads                │ turn_on/off
             ▼                      ▼                      ▼
      MoistureHistory         DeviceController ◄───────────┘
                                    │
                                    ▼
                                 EventBus → event log, SMS
"""

from app.control_loops.base import PeriodicLoop
from app.control_loops.flow_monitor import FlowMonitor, classify_flow
from app.control_loops.moisture_sampler import MoistureSampler
from app.control_loops.schedule_engine import ScheduleEngine

__all__ = [
    "FlowMonitor",
    "MoistureSampler",
    "PeriodicLoop",
    "ScheduleEngine",
    "classify_flow",
]
