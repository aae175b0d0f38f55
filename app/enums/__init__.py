"""
Enums Module
============

Enumeration types for event topics and transition sources.
"""

from app.enums.events import DeviceEvent, NotificationEvent, SensorEvent, TransitionSource

__all__ = [
    "DeviceEvent",
    "NotificationEvent",
    "SensorEvent",
    "TransitionSource",
]
