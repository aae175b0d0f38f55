"""
Event Log Service
=================
Ships controller events to the remote event log.

Every event is a short string ("on", "off", "watering system alert")
stamped with UTC time and sent as ``{"value": "<event> <timestamp>"}`` to:

- an MQTT topic, when WATERING_ENABLE_MQTT is set
- an HTTP datastore, when WATERING_DATASTORE_URL is set

Both sinks are optional and failures are logged, never raised: the remote
log is observability, not control.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import requests

from app.config import AppConfig
from app.enums.events import DeviceEvent, NotificationEvent, SensorEvent
from app.hardware.mqtt.client_factory import create_mqtt_client
from app.utils.event_bus import EventBus
from app.utils.time import iso_utc_seconds, utc_now

logger = logging.getLogger(__name__)


class EventLogService:
    """Publishes event strings to MQTT and/or an HTTP datastore."""

    def __init__(self, config: AppConfig, *, timeout: float = 5.0):
        self.enable_mqtt = config.enable_mqtt
        self.broker = config.mqtt_broker_host
        self.port = config.mqtt_broker_port
        self.topic = config.mqtt_topic
        self.datastore_url = config.datastore_url
        self.datastore_token = config.datastore_token
        self.timeout = timeout
        self.client = None
        self.events_logged = 0

    def connect(self) -> None:
        """Connect to the MQTT broker if enabled; failure disables MQTT."""
        if not self.enable_mqtt or self.client is not None:
            return
        try:
            client = create_mqtt_client(client_id="watering-system")
            client.connect(self.broker, self.port, 60)
            client.loop_start()
            self.client = client
            logger.info("Connected to MQTT broker at %s:%s", self.broker, self.port)
        except Exception as exc:
            # In test or offline environments we continue without MQTT.
            logger.warning("MQTT event log disabled (connection failed): %s", exc)

    def close(self) -> None:
        if self.client is None:
            return
        client, self.client = self.client, None
        try:
            client.loop_stop()
            client.disconnect()
            logger.info("Disconnected from MQTT broker.")
        except Exception as exc:
            logger.error("Error disconnecting from MQTT broker: %s", exc)

    def register(self, event_bus: EventBus) -> None:
        event_bus.subscribe(DeviceEvent.PUMP_STATE_CHANGED, self._on_pump_state)
        event_bus.subscribe(NotificationEvent.FLOW_ANOMALY, self._on_flow_alert)
        event_bus.subscribe(SensorEvent.MOISTURE_READING, self._on_moisture)

    def _on_pump_state(self, payload: dict[str, Any]) -> None:
        self.log_event(payload["state"], payload.get("timestamp"))

    def _on_flow_alert(self, payload: dict[str, Any]) -> None:
        self.log_event(payload.get("message") or "watering system alert", payload.get("timestamp"))

    def _on_moisture(self, payload: dict[str, Any]) -> None:
        self.publish_sensor_update("moisture", payload)

    def log_event(self, event: str, timestamp: str | None = None) -> str:
        """Send one event to every configured sink; returns the JSON body."""
        stamp = timestamp or iso_utc_seconds(utc_now())
        text = json.dumps({"value": f"{event} {stamp}"})
        self.events_logged += 1
        logger.info("Event: %s at %s", event, stamp)
        self._publish_mqtt(self.topic, text)
        self._post_datastore(text)
        return text

    def publish_sensor_update(self, sensor_type: str, data: dict[str, Any]) -> bool:
        """Publishes a sensor reading under ``<topic>/sensors/<type>``."""
        return self._publish_mqtt(f"{self.topic}/sensors/{sensor_type}", json.dumps(data))

    def _publish_mqtt(self, topic: str, text: str) -> bool:
        if self.client is None:
            return False
        try:
            self.client.publish(topic, text)
            return True
        except Exception as exc:
            logger.warning("MQTT publish failed for %s: %s", topic, exc)
            return False

    def _post_datastore(self, text: str) -> bool:
        if not self.datastore_url:
            return False
        headers = {"Content-Type": "application/json"}
        if self.datastore_token:
            headers["Authorization"] = self.datastore_token
        try:
            response = requests.put(self.datastore_url, data=text, headers=headers, timeout=self.timeout)
            response.raise_for_status()
            return True
        except requests.RequestException as exc:
            logger.error("Failed to log event to datastore: %s", exc)
            return False

    def get_status(self) -> dict[str, Any]:
        return {
            "mqtt_connected": self.client is not None,
            "datastore_configured": bool(self.datastore_url),
            "events_logged": self.events_logged,
        }
