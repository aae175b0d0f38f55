from __future__ import annotations

import logging

from flask import Blueprint, current_app, render_template

from app.blueprints.api._common import get_context

ui_bp = Blueprint("ui", __name__)
logger = logging.getLogger(__name__)


@ui_bp.get("/")
def index():
    """Dashboard with the recent moisture readings, newest first."""
    samples = get_context().moisture_sampler.samples()
    return render_template("index.html", samples=samples)


@ui_bp.get("/styles.css")
def styles():
    return current_app.send_static_file("styles.css")
