"""
Schedule API
============
GET returns the 24-slot schedule keyed by hour; PUT replaces the hours the
body carries in one atomic update.
"""

import logging

from flask import Blueprint, current_app, jsonify

from app.schemas.schedule import parse_schedule_payload
from app.utils.http import ok_response, safe_route

from ._common import get_context, get_json_body

logger = logging.getLogger(__name__)

schedule_api = Blueprint("schedule_api", __name__)


@schedule_api.get("/schedule")
@safe_route("Failed to read schedule")
def get_schedule():
    """Current schedule as {"0": {"on": 0|1, "off": 0|1}, ...}"""
    return jsonify(get_context().schedule.to_dict())


@schedule_api.put("/schedule")
@safe_route("Failed to update schedule")
def put_schedule():
    """
    Replace schedule slots.

    Request body:
        {"0": {"on": 1, "off": 0}, ..., "23": {"on": 0, "off": 1}}
    """
    body = get_json_body()
    slots = parse_schedule_payload(body, strict=current_app.config.get("STRICT_SCHEDULE", False))
    get_context().schedule.apply(slots)
    logger.info("Schedule updated (%d hours)", len(slots))
    return ok_response()
