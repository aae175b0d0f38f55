"""Tests for board detection."""

import pytest

from app.domain.exceptions import UnsupportedEnvironmentError
from app.hardware.platform import ensure_supported_platform, is_raspberry_pi, read_board_model


@pytest.fixture()
def pi_model(tmp_path):
    model = tmp_path / "model"
    model.write_bytes(b"Raspberry Pi 4 Model B Rev 1.4\x00")
    return model


def test_reads_model_without_trailing_nul(pi_model):
    assert read_board_model(pi_model) == "Raspberry Pi 4 Model B Rev 1.4"
    assert is_raspberry_pi(pi_model)


def test_missing_model_file(tmp_path):
    missing = tmp_path / "absent"

    assert read_board_model(missing) is None
    assert not is_raspberry_pi(missing)


def test_gpio_backend_on_pi(pi_model):
    assert ensure_supported_platform("gpio", pi_model) == "Raspberry Pi 4 Model B Rev 1.4"


def test_gpio_backend_off_pi_is_rejected(tmp_path):
    other = tmp_path / "model"
    other.write_text("BeagleBone Black")

    with pytest.raises(UnsupportedEnvironmentError):
        ensure_supported_platform("gpio", other)
    with pytest.raises(UnsupportedEnvironmentError):
        ensure_supported_platform("gpio", tmp_path / "absent")


def test_simulated_backend_runs_anywhere(tmp_path):
    assert ensure_supported_platform("simulated", tmp_path / "absent") == "simulated"
