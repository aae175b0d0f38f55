# Description: GPIO relay driving the water pump on a Raspberry Pi.
#
import logging

from app.domain.exceptions import DeviceError, DeviceIOError

from .relay_base import RelayBase

logger = logging.getLogger(__name__)


class GPIORelay(RelayBase):
    """
    Controls the pump relay using Raspberry Pi GPIO.

    Attributes:
        device (str): The name of the controlled device.
        pin (int): The BCM GPIO pin used to control the relay.

    Methods:
        turn_on(): Turns the relay on by setting the GPIO pin HIGH.
        turn_off(): Turns the relay off by setting the GPIO pin LOW.
        cleanup(): Releases the GPIO pin resources.
    """

    def __init__(self, device: str, pin: int):
        """
        Initializes the GPIO relay with the specified GPIO pin, output LOW.

        Args:
            device (str): The name of the device.
            pin (int): The GPIO pin number to control the relay.

        Raises:
            DeviceError: RPi.GPIO is not importable or the pin cannot be claimed.
        """
        super().__init__(device)
        self.pin = pin
        self._released = False
        self.GPIO = self._setup_gpio()
        try:
            self.GPIO.setmode(self.GPIO.BCM)
            self.GPIO.setup(self.pin, self.GPIO.OUT, initial=self.GPIO.LOW)
        except Exception as e:
            raise DeviceError(f"Cannot claim GPIO pin {self.pin} for {self.device}: {e}") from e
        logger.info("GPIO pin %s set as OUTPUT for %s", self.pin, self.device)

    def _setup_gpio(self):
        """Imports GPIO only when running on a Raspberry Pi."""
        try:
            import RPi.GPIO as GPIO  # type: ignore

            return GPIO
        except (ImportError, RuntimeError) as e:
            raise DeviceError(f"RPi.GPIO is not available: {e}") from e

    def _write(self, level: int, label: str) -> None:
        if self._released:
            raise DeviceIOError(f"GPIO relay {self.device} has been released")
        try:
            self.GPIO.output(self.pin, level)
        except Exception as e:
            raise DeviceIOError(f"Error turning {label} GPIO relay {self.device}: {e}") from e
        logger.debug("GPIO relay %s on pin %s -> %s", self.device, self.pin, label)

    def turn_on(self) -> None:
        """Turns the relay on by setting the GPIO pin HIGH."""
        self._write(self.GPIO.HIGH, "on")

    def turn_off(self) -> None:
        """Turns the relay off by setting the GPIO pin LOW."""
        self._write(self.GPIO.LOW, "off")

    def cleanup(self) -> None:
        """Releases the GPIO pin resources."""
        if self._released:
            return
        self._released = True
        try:
            self.GPIO.output(self.pin, self.GPIO.LOW)
            self.GPIO.cleanup(self.pin)
            logger.info("Cleaned up GPIO pin %s for %s", self.pin, self.device)
        except Exception as e:
            logger.error("Error cleaning up GPIO pin %s: %s", self.pin, e)
