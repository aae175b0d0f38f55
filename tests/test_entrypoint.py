"""Tests for the command-line entry point."""

from unittest.mock import MagicMock

import pytest

import app as app_package
import watering_system_app
from app.hardware import bundle as bundle_module
from app.hardware import platform as platform_module
from app.hardware.platform import EXIT_UNSUPPORTED_PLATFORM


@pytest.fixture()
def clean_env(config, monkeypatch):
    # config fixture has already scrubbed the environment
    monkeypatch.setattr(app_package, "_install_shutdown_handlers", MagicMock())
    return monkeypatch


def test_exits_10_off_raspberry_pi(clean_env, tmp_path):
    clean_env.setenv("WATERING_HARDWARE", "gpio")
    clean_env.setattr(
        bundle_module,
        "ensure_supported_platform",
        lambda backend: platform_module.ensure_supported_platform(backend, tmp_path / "model"),
    )
    gpio_relay = MagicMock()
    clean_env.setattr(bundle_module, "GPIORelay", gpio_relay)

    assert watering_system_app.main() == EXIT_UNSUPPORTED_PLATFORM == 10
    gpio_relay.assert_not_called()


def test_invalid_config_exits_2(clean_env):
    clean_env.setenv("WATERING_HARDWARE", "serial")

    assert watering_system_app.main() == 2


def test_simulated_run_releases_hardware(clean_env):
    opened = []
    original_simulated = bundle_module.HardwareBundle.simulated

    def tracking_simulated():
        hardware = original_simulated()
        opened.append(hardware)
        return hardware

    clean_env.setattr(bundle_module.HardwareBundle, "simulated", staticmethod(tracking_simulated))
    run = MagicMock()
    clean_env.setattr("flask.Flask.run", run)

    assert watering_system_app.main() == 0

    run.assert_called_once()
    assert opened[0].closed
    assert opened[0].relay.released
