"""
Hardware Service Layer
======================
The device controller is the only service allowed to write the pump relay.
"""

from app.services.hardware.device_controller import DeviceController

__all__ = ["DeviceController"]
