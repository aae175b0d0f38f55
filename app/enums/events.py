from enum import Enum


class DeviceEvent(str, Enum):
    """Pump state changes published by the device controller."""

    PUMP_STATE_CHANGED = "pump_state_changed"


class SensorEvent(str, Enum):
    MOISTURE_READING = "moisture_reading"


class NotificationEvent(str, Enum):
    FLOW_ANOMALY = "flow_anomaly"


class TransitionSource(str, Enum):
    """Who asked for a pump transition."""

    SCHEDULE = "schedule"
    API = "api"
    SHUTDOWN = "shutdown"
