"""
Configuration for the Watering System controller
================================================
Runtime settings for the pump controller, its control loops, the HTTP
control surface and the external collaborators (SMS gateway, event log).
Every value can be overridden from the environment. Also sets up logging.
"""

import logging
import os
import sys
from dataclasses import dataclass, field
from logging.handlers import RotatingFileHandler
from typing import Any


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.lower() in {"1", "true", "t", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"Environment variable {name} must be an integer.") from None


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        raise ValueError(f"Environment variable {name} must be a number.") from None


HARDWARE_BACKENDS = ("gpio", "simulated")


@dataclass
class AppConfig:
    """Runtime configuration loaded from environment variables."""

    environment: str = field(default_factory=lambda: os.getenv("WATERING_ENV", "development"))
    secret_key: str = field(default_factory=lambda: os.getenv("WATERING_SECRET_KEY", "WateringDevSecretKey"))
    host: str = field(default_factory=lambda: os.getenv("WATERING_HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: _env_int("WATERING_PORT", 3000))

    DEBUG: bool = field(default_factory=lambda: _env_bool("WATERING_DEBUG", False))
    log_path: str = field(default_factory=lambda: os.getenv("WATERING_LOG_PATH", "logs/watering.log"))

    # Hardware wiring
    hardware_backend: str = field(default_factory=lambda: os.getenv("WATERING_HARDWARE", "gpio").lower())
    pump_pin: int = field(default_factory=lambda: _env_int("WATERING_PUMP_PIN", 4))
    flow_pin: int = field(default_factory=lambda: _env_int("WATERING_FLOW_PIN", 17))
    moisture_channel: int = field(default_factory=lambda: _env_int("WATERING_MOISTURE_CHANNEL", 1))

    # Control loop timing (seconds)
    moisture_interval: float = field(default_factory=lambda: _env_float("WATERING_MOISTURE_INTERVAL", 10.0))
    flow_interval: float = field(default_factory=lambda: _env_float("WATERING_FLOW_INTERVAL", 2.0))
    schedule_interval: float = field(default_factory=lambda: _env_float("WATERING_SCHEDULE_INTERVAL", 1.0))
    alert_cooldown_seconds: float = field(default_factory=lambda: _env_float("WATERING_ALERT_COOLDOWN", 300.0))
    fire_window_seconds: float = field(default_factory=lambda: _env_float("WATERING_FIRE_WINDOW", 5.0))
    history_size: int = field(default_factory=lambda: _env_int("WATERING_HISTORY_SIZE", 20))

    # Reject schedule payloads that do not carry all 24 hours
    strict_schedule: bool = field(default_factory=lambda: _env_bool("WATERING_STRICT_SCHEDULE", False))

    # Remote event log
    enable_mqtt: bool = field(default_factory=lambda: _env_bool("WATERING_ENABLE_MQTT", False))
    mqtt_broker_host: str = field(default_factory=lambda: os.getenv("WATERING_MQTT_HOST", "localhost"))
    mqtt_broker_port: int = field(default_factory=lambda: _env_int("WATERING_MQTT_PORT", 1883))
    mqtt_topic: str = field(default_factory=lambda: os.getenv("WATERING_MQTT_TOPIC", "watering-system/events"))
    datastore_url: str = field(default_factory=lambda: os.getenv("WATERING_DATASTORE_URL", ""))
    datastore_token: str = field(default_factory=lambda: os.getenv("WATERING_DATASTORE_TOKEN", ""))

    # Twilio SMS gateway
    twilio_sid: str = field(default_factory=lambda: os.getenv("TWILIO_SID", ""))
    twilio_token: str = field(default_factory=lambda: os.getenv("TWILIO_TOKEN", ""))
    twilio_to: str = field(default_factory=lambda: os.getenv("TWILIO_TO", ""))
    twilio_from: str = field(default_factory=lambda: os.getenv("TWILIO_FROM", ""))

    eventbus_queue_size: int = field(default_factory=lambda: _env_int("WATERING_EVENTBUS_QUEUE_SIZE", 256))
    eventbus_worker_count: int = field(default_factory=lambda: _env_int("WATERING_EVENTBUS_WORKER_COUNT", 2))

    _DEFAULT_SECRET_KEY: str = field(default="WateringDevSecretKey", init=False, repr=False)

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.hardware_backend not in HARDWARE_BACKENDS:
            raise ValueError(
                f"WATERING_HARDWARE must be one of {', '.join(HARDWARE_BACKENDS)} (got {self.hardware_backend!r})."
            )
        if self.history_size < 1:
            raise ValueError("WATERING_HISTORY_SIZE must be at least 1.")
        if self.environment == "production" and self.secret_key == self._DEFAULT_SECRET_KEY:
            raise RuntimeError(
                "SECURITY ERROR: Cannot use default secret key in production!\n"
                "Set WATERING_SECRET_KEY environment variable to a secure random value."
            )

    @property
    def twilio_configured(self) -> bool:
        return all((self.twilio_sid, self.twilio_token, self.twilio_to, self.twilio_from))

    def as_flask_config(self) -> dict[str, Any]:
        """Render configuration values for Flask application."""
        return {
            "SECRET_KEY": self.secret_key,
            "DEBUG": self.DEBUG,
            "ENV": self.environment,
            "STRICT_SCHEDULE": self.strict_schedule,
        }


CONSOLE_HANDLER = "watering_console"
FILE_HANDLER = "watering_file"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _named_handler(root: logging.Logger, name: str) -> logging.Handler | None:
    for handler in root.handlers:
        if getattr(handler, "name", "") == name:
            return handler
    return None


def setup_logging(debug: bool = False, log_path: str | None = None) -> None:
    """
    Attach the console handler and, when ``log_path`` is set, a rotating file
    handler to the root logger.

    Safe to call repeatedly: handlers are found by name and only their level
    is updated on later calls.
    """
    level = logging.DEBUG if debug else logging.INFO
    root = logging.getLogger()
    root.setLevel(level)
    formatter = logging.Formatter(LOG_FORMAT)
    created = False

    if _named_handler(root, CONSOLE_HANDLER) is None:
        console = logging.StreamHandler(stream=sys.stdout)
        console.name = CONSOLE_HANDLER
        console.setFormatter(formatter)
        root.addHandler(console)
        created = True

    if log_path and _named_handler(root, FILE_HANDLER) is None:
        log_dir = os.path.dirname(log_path)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        rotating = RotatingFileHandler(log_path, maxBytes=10 * 1024 * 1024, backupCount=3, encoding="utf-8")
        rotating.name = FILE_HANDLER
        rotating.setFormatter(formatter)
        root.addHandler(rotating)
        created = True

    for name in (CONSOLE_HANDLER, FILE_HANDLER):
        handler = _named_handler(root, name)
        if handler is not None:
            handler.setLevel(level)

    if created:
        root.info("Logging initialized at level %s", logging.getLevelName(level))

    if not debug:
        # Request lines and connection pool chatter
        logging.getLogger("werkzeug").setLevel(logging.WARNING)
        logging.getLogger("urllib3").setLevel(logging.WARNING)


def load_config() -> AppConfig:
    """Load configuration from the environment."""
    return AppConfig()
