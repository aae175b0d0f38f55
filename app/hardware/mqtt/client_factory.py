"""
Helpers for constructing MQTT clients that work across paho-mqtt 1.x and 2.x.

The event log only publishes, so no callbacks are registered; under 2.x the
current callback API is requested to avoid the deprecation warning.
"""
from __future__ import annotations

from typing import Any

import paho.mqtt.client as mqtt


def create_mqtt_client(client_id: str = "", **kwargs: Any) -> mqtt.Client:
    """
    Build an MQTT client for paho-mqtt 2.x, falling back to the 1.x constructor.

    Args:
        client_id: Optional client identifier.
        kwargs: Extra keyword arguments forwarded to the client constructor.
    """
    client_kwargs: dict[str, Any] = {"client_id": client_id or ""}
    client_kwargs["protocol"] = kwargs.pop("protocol", getattr(mqtt, "MQTTv311", 4))
    client_kwargs.update(kwargs)

    callback_api_version = getattr(mqtt, "CallbackAPIVersion", None)
    if callback_api_version is not None:
        client_kwargs["callback_api_version"] = callback_api_version.VERSION2
    return mqtt.Client(**client_kwargs)
