"""
Hardware platform detection.

The GPIO backend drives a relay and reads a pulse flow meter and an ADS1115
moisture channel, which is only wired up on a Raspberry Pi. Detection runs
before any handle is opened so an unsupported board fails fast.
"""

import logging
from pathlib import Path

from app.domain.exceptions import UnsupportedEnvironmentError

logger = logging.getLogger(__name__)

MODEL_FILE = Path("/proc/device-tree/model")

# Process exit code when the board is not supported
EXIT_UNSUPPORTED_PLATFORM = 10


def read_board_model(model_file: Path = MODEL_FILE) -> str | None:
    """Return the device-tree model string, or None off-board."""
    try:
        return model_file.read_text(encoding="utf-8", errors="ignore").strip("\x00\n ")
    except OSError:
        return None


def is_raspberry_pi(model_file: Path = MODEL_FILE) -> bool:
    model = read_board_model(model_file)
    return bool(model) and "raspberry pi" in model.lower()


def ensure_supported_platform(backend: str, model_file: Path = MODEL_FILE) -> str:
    """
    Check the board can run the configured hardware backend.

    Args:
        backend: ``"gpio"`` or ``"simulated"``.
        model_file: Device-tree model file (overridable for tests).

    Returns:
        A short description of the detected platform.

    Raises:
        UnsupportedEnvironmentError: ``gpio`` was requested off a Raspberry Pi.
    """
    if backend == "simulated":
        logger.info("Using simulated hardware backend")
        return "simulated"

    model = read_board_model(model_file)
    if not model or "raspberry pi" not in model.lower():
        raise UnsupportedEnvironmentError(
            "Unsupported platform: GPIO backend requires a Raspberry Pi",
            detail={"model": model},
        )
    logger.info("Detected %s", model)
    return model
