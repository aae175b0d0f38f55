from typing import Literal

from pydantic import BaseModel, Field

PumpState = Literal["on", "off"]
AnomalyKind = Literal["no_flow_while_on", "flow_while_off"]


class PumpStatePayload(BaseModel):
    """Payload for pump state change events."""

    schema_version: int = Field(default=1)
    state: PumpState
    source: str
    timestamp: str


class MoistureReadingPayload(BaseModel):
    schema_version: int = Field(default=1)
    value: int
    timestamp: str


class FlowAlertPayload(BaseModel):
    """Payload for a flow anomaly that passed the alert cooldown."""

    schema_version: int = Field(default=1)
    kind: AnomalyKind
    flow_rate: int
    pump_on: bool
    message: str = "watering system alert"
    timestamp: str
