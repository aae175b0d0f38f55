from __future__ import annotations

import atexit
import contextlib
import dataclasses
import logging
import signal
import threading
from typing import TYPE_CHECKING, Any

from flask import Flask

from app.blueprints.api import pump_api, schedule_api
from app.blueprints.ui import ui_bp
from app.config import AppConfig, load_config, setup_logging

if TYPE_CHECKING:
    from app.services.container import WateringContext


def create_app(
    config_overrides: dict[str, Any] | None = None,
    *,
    context: "WateringContext | None" = None,
    install_signal_handlers: bool = False,
) -> Flask:
    """Create the Flask control surface around a WateringContext.

    Args:
        config_overrides: Field overrides (``DEBUG``, ``STRICT_SCHEDULE``, ...) applied to a copy
            of the config; the context's own config is left untouched.
        context: Pre-built context (tests, or a runtime built by the entry point).
            When omitted, hardware is opened per the config and the loops started.
        install_signal_handlers: Register SIGINT/SIGTERM handlers that shut the
            context down before exiting.
    """
    config = context.config if context is not None else load_config()
    if config_overrides:
        config = _apply_overrides(config, config_overrides)

    # Configure logging early so hardware bootstrap is visible in the terminal and log file.
    setup_logging(debug=config.DEBUG, log_path=config.log_path)

    if context is None:
        context = _bootstrap_context(config)

    flask_app = Flask(__name__, static_folder="static", template_folder="templates")
    flask_app.config.update(config.as_flask_config())
    flask_app.config["CONTEXT"] = context

    flask_app.register_blueprint(ui_bp)
    flask_app.register_blueprint(schedule_api)
    flask_app.register_blueprint(pump_api)

    if install_signal_handlers:
        _install_shutdown_handlers(context)

    return flask_app


def _apply_overrides(config: AppConfig, overrides: dict[str, Any]) -> AppConfig:
    """Copy of ``config`` with overrides keyed by field name, matched as written or lowercased.

    Raises:
        ValueError: A key names no configuration field.
    """
    names = {f.name for f in dataclasses.fields(config) if f.init}
    changes: dict[str, Any] = {}
    for key, value in overrides.items():
        name = key if key in names else key.lower()
        if name not in names:
            raise ValueError(f"Unknown configuration key: {key}")
        changes[name] = value
    return dataclasses.replace(config, **changes)


def _bootstrap_context(config: AppConfig) -> "WateringContext":
    from app.hardware.bundle import HardwareBundle
    from app.services.container import WateringContext

    hardware = HardwareBundle.open(config)
    try:
        context = WateringContext.build(config, hardware)
    except Exception:
        hardware.close()
        raise
    context.start()
    return context


def _install_shutdown_handlers(context: "WateringContext") -> None:
    """Graceful shutdown on SIGINT/SIGTERM and at interpreter exit."""
    _shutdown_lock = threading.Lock()
    _shutdown_done = False

    def _graceful_shutdown(reason: str = "unknown") -> None:
        nonlocal _shutdown_done
        with _shutdown_lock:
            if _shutdown_done:
                return
            _shutdown_done = True
        logging.info("Graceful shutdown initiated (%s)", reason)
        try:
            context.shutdown()
        except Exception as exc:
            logging.warning("Error during graceful shutdown: %s", exc)

    def _signal_handler(signum: int, _frame: object) -> None:
        sig_name = signal.Signals(signum).name
        logging.info("Received %s, shutting down", sig_name)
        _graceful_shutdown(sig_name)
        raise SystemExit(0)

    # Register atexit (covers normal interpreter exit)
    atexit.register(_graceful_shutdown, "atexit")

    # Register OS signal handlers (SIGINT=Ctrl-C, SIGTERM=container/systemd stop)
    for sig in (signal.SIGINT, signal.SIGTERM):
        with contextlib.suppress(OSError, ValueError):
            signal.signal(sig, _signal_handler)
