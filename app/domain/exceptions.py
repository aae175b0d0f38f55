"""Centralized exception hierarchy for the watering system.

All domain and service exceptions inherit from :class:`WateringSystemError`
so that callers can catch a single base class when they need a broad safety
net, yet still match on specific subclasses where narrower handling is
appropriate.

Blueprint-level error handling (see ``app/utils/http.safe_route``) maps these
to the correct HTTP status codes automatically.

Hierarchy
---------
::

    WateringSystemError (base, maps to 500)
    ├── ValidationError              (400, bad input from caller)
    │   ├── MalformedRequestError    (400, body is not a schedule)
    │   └── SchemaMismatchError      (400, schedule without 24 hours)
    ├── ConfigurationError           (500, missing / invalid config)
    ├── UnsupportedEnvironmentError  (500, unknown hardware platform)
    └── DeviceError                  (503, hardware communication)
        ├── DeviceIOError            (503, actuator write failed)
        └── SensorIOError            (503, sensor read failed)
"""

from __future__ import annotations


class WateringSystemError(Exception):
    """Base exception for all watering system errors.

    Parameters
    ----------
    message:
        Human-readable description (logged server-side, **not** leaked to
        the HTTP client unless the exception class opts in).
    detail:
        Optional machine-readable context dict attached to the error for
        structured logging.
    """

    http_status: int = 500

    def __init__(self, message: str = "", *, detail: dict | None = None) -> None:
        super().__init__(message)
        self.detail = detail or {}


# ── Client errors (4xx) ──────────────────────────────────────────────


class ValidationError(WateringSystemError):
    """Caller supplied invalid or incomplete input (HTTP 400)."""

    http_status: int = 400


class MalformedRequestError(ValidationError):
    """Request body does not parse as a schedule payload (HTTP 400)."""


class SchemaMismatchError(ValidationError):
    """Schedule payload does not carry exactly 24 hourly entries (HTTP 400)."""


# ── Server errors (5xx) ──────────────────────────────────────────────


class ConfigurationError(WateringSystemError):
    """Missing or invalid application configuration (HTTP 500)."""

    http_status: int = 500


class UnsupportedEnvironmentError(WateringSystemError):
    """The process is not running on a supported hardware platform."""

    http_status: int = 500


class DeviceError(WateringSystemError):
    """Hardware communication or device-protocol failure (HTTP 503)."""

    http_status: int = 503


class DeviceIOError(DeviceError):
    """Writing to the pump relay failed."""


class SensorIOError(DeviceError):
    """Reading a moisture or flow sensor failed."""
