"""
Pump Control API
================
Manual pump overrides and a JSON status snapshot.
"""

import logging

from flask import Blueprint, jsonify

from app.enums.events import TransitionSource
from app.utils.http import ok_response, safe_route

from ._common import get_context

logger = logging.getLogger(__name__)

pump_api = Blueprint("pump_api", __name__)


@pump_api.get("/on")
@safe_route("Failed to turn pump on")
def turn_on():
    get_context().device.turn_on(TransitionSource.API)
    return ok_response()


@pump_api.get("/off")
@safe_route("Failed to turn pump off")
def turn_off():
    get_context().device.turn_off(TransitionSource.API)
    return ok_response()


@pump_api.get("/status")
@safe_route("Failed to read controller status")
def status():
    return jsonify(get_context().status())
