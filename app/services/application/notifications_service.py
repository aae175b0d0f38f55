"""
Notifications Service
=====================
Delivers flow anomaly alerts as SMS through the Twilio REST API.

The gateway needs four settings (TWILIO_SID, TWILIO_TOKEN, TWILIO_TO,
TWILIO_FROM). When any is missing the service degrades to a log-only
notice instead of failing, so the controller still runs without SMS.

Handlers run on EventBus worker threads; a slow gateway delays only the
SMS, never the flow monitor.
"""

from __future__ import annotations

import logging
from typing import Any

import requests

from app.config import AppConfig
from app.enums.events import NotificationEvent
from app.utils.event_bus import EventBus

logger = logging.getLogger(__name__)

TWILIO_API_VERSION = "2010-04-01"
TWILIO_BASE_URL = "https://api.twilio.com"
ALERT_BODY = "Watering System Alert!"


class NotificationsService:
    """SMS alert delivery with graceful degradation."""

    def __init__(self, config: AppConfig, *, timeout: float = 10.0):
        self.account_sid = config.twilio_sid
        self.auth_token = config.twilio_token
        self.to_number = config.twilio_to
        self.from_number = config.twilio_from
        self.timeout = timeout
        self.sent_count = 0
        self.failed_count = 0
        self.log_only_count = 0
        if not self.configured:
            logger.warning("Twilio not configured. Flow alerts will be logged only.")

    @property
    def configured(self) -> bool:
        return all((self.account_sid, self.auth_token, self.to_number, self.from_number))

    @property
    def messages_url(self) -> str:
        return f"{TWILIO_BASE_URL}/{TWILIO_API_VERSION}/Accounts/{self.account_sid}/Messages.json"

    def register(self, event_bus: EventBus) -> None:
        event_bus.subscribe(NotificationEvent.FLOW_ANOMALY, self.handle_flow_alert)

    def handle_flow_alert(self, payload: dict[str, Any]) -> None:
        logger.info("Flow alert received: %s (flow=%s)", payload.get("kind"), payload.get("flow_rate"))
        self.send_sms(ALERT_BODY)

    def send_sms(self, body: str) -> bool:
        """
        Send an SMS to the configured destination.

        Args:
            body: Message text

        Returns:
            True if Twilio accepted the message
        """
        if not self.configured:
            self.log_only_count += 1
            logger.warning("Twilio not configured. Alert not sent: %s", body)
            return False

        data = {"To": self.to_number, "From": self.from_number, "Body": body}
        try:
            response = requests.post(
                self.messages_url,
                data=data,
                auth=(self.account_sid, self.auth_token),
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.RequestException as e:
            # Log and continue; notification failure should not crash alert processing
            self.failed_count += 1
            logger.error("Failed to send SMS alert: %s", e)
            return False

        self.sent_count += 1
        logger.info("SMS Sent to %s", self.to_number)
        return True

    def get_status(self) -> dict[str, Any]:
        return {
            "configured": self.configured,
            "sent": self.sent_count,
            "failed": self.failed_count,
            "log_only": self.log_only_count,
        }
