"""
Blueprint Common Utilities
==========================

Shared helper functions for the control-surface blueprints.

Usage:
    from app.blueprints.api._common import get_context, get_json_body
"""
from __future__ import annotations

import json
import logging
from typing import Any

from flask import current_app, request

from app.domain.exceptions import MalformedRequestError

logger = logging.getLogger("api._common")


def get_context():
    """
    Get the WateringContext from Flask app config.

    Raises:
        RuntimeError: If the context is not configured
    """
    context = current_app.config.get("CONTEXT")
    if context is None:
        raise RuntimeError("WateringContext not found in app config")
    return context


def get_json_body() -> Any:
    """
    Decode the request body as JSON regardless of Content-Type.

    Raises:
        MalformedRequestError: Body is empty or not valid JSON
    """
    raw = request.get_data(cache=True, as_text=True)
    if not raw.strip():
        raise MalformedRequestError("Request body is empty")
    try:
        return json.loads(raw)
    except ValueError as exc:
        raise MalformedRequestError("Request body is not valid JSON") from exc
