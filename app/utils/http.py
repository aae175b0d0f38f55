"""
HTTP response helpers for the control surface.

Control endpoints answer ``ok`` as plain text. Failures use a JSON envelope
``{"ok": false, "data": null, "error": {...}, "message": ...}`` whose status
comes from the exception's ``http_status``.
"""

from __future__ import annotations

import functools
import logging
from typing import Any, Callable

from flask import Response, jsonify

from app.utils.time import iso_now

_log = logging.getLogger(__name__)

# Client-facing text for server-side failures; the exception itself is only logged
_PUBLIC_MESSAGES: dict[int, str] = {
    400: "Invalid request",
    500: "An internal error occurred",
    503: "Device unavailable",
}


def ok_response() -> Response:
    """Plain-text ``ok`` used by the control endpoints."""
    return Response("ok", status=200, mimetype="text/plain")


def error_response(message: str, status: int = 500, *, details: dict | None = None) -> Response:
    error: dict[str, Any] = {"message": message, "timestamp": iso_now()}
    body: dict[str, Any] = {"ok": False, "data": None, "error": error, "message": message}
    if details:
        error.update(details)
        body["details"] = details
    response = jsonify(body)
    response.status_code = status
    return response


def safe_error(exc: BaseException, status: int = 500, *, context: str = "") -> Response:
    """Log ``exc`` with its traceback and answer with a generic message for ``status``."""
    _log.error("Request failed [%s] %s: %s", status, context, exc, exc_info=exc)
    return error_response(_PUBLIC_MESSAGES.get(status, _PUBLIC_MESSAGES[500]), status)


def safe_route(error_message: str = "An internal error occurred", *, error_status: int = 500) -> Callable:
    """Wrap a route so domain errors become envelope responses.

    ``WateringSystemError`` subclasses keep their ``http_status``: client
    errors (4xx) echo the exception text and ``detail``, server errors get
    the generic message. Anything else is answered with ``error_status``.

    Usage::

        @pump_api.get("/on")
        @safe_route("Failed to turn pump on")
        def turn_on():
            ...
    """
    from app.domain.exceptions import WateringSystemError

    def decorator(fn: Callable) -> Callable:
        @functools.wraps(fn)
        def wrapper(*args: Any, **kwargs: Any) -> Response:
            try:
                return fn(*args, **kwargs)
            except WateringSystemError as exc:
                if exc.http_status >= 500:
                    return safe_error(exc, exc.http_status, context=error_message)
                return error_response(str(exc) or error_message, exc.http_status, details=exc.detail or None)
            except Exception as exc:
                return safe_error(exc, error_status, context=error_message)

        return wrapper

    return decorator
