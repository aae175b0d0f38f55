"""
Internal hardware driver for analog soil moisture sensor via ADS1115 ADC.
This module should only be used by the hardware bundle, not directly by application code.
"""

import logging
import time

from app.domain.exceptions import DeviceError

from .base import BaseSensorDriver

logger = logging.getLogger(__name__)


class SoilMoistureSensor(BaseSensorDriver):
    """
    Hardware driver for an analog soil moisture probe read through an ADS1115.
    Returns the raw 16-bit ADC value; higher means drier.
    """

    name = "moisture"

    def __init__(self, adc_channel: int = 1, i2c_address: int = 0x48, retries: int = 3, delay: float = 0.1):
        """
        Initialize the soil moisture sensor hardware.

        Args:
            adc_channel: ADS1115 single-ended channel (0-3).
            i2c_address: ADS1115 I2C address.
            retries: Read attempts before giving up on a tick.
            delay: Seconds between attempts.
        """
        self.adc_channel = adc_channel
        self.i2c_address = i2c_address
        self.retries = max(1, retries)
        self.delay = delay
        self._i2c = None
        try:
            import board
            import busio
            import adafruit_ads1x15.ads1115 as ADS
            from adafruit_ads1x15.analog_in import AnalogIn

            self._i2c = busio.I2C(board.SCL, board.SDA)
            self.adc = ADS.ADS1115(self._i2c, address=self.i2c_address)
            self._channel = AnalogIn(self.adc, adc_channel)
        except (ImportError, NotImplementedError, RuntimeError, ValueError, OSError) as e:
            self.cleanup()
            raise DeviceError(f"Failed to initialize ADS1115 for soil sensor: {e}") from e
        logger.info("Soil moisture sensor initialized on ADS1115 channel %s", adc_channel)

    def read(self) -> int:
        """
        Read the raw ADC value with retry logic.

        Raises:
            SensorIOError: Every attempt failed.
        """
        last_error: Exception | None = None
        for attempt in range(self.retries):
            try:
                return int(self._channel.value)
            except OSError as e:
                last_error = e
                logger.warning("Soil sensor read failed (attempt %s): %s", attempt + 1, e)
                time.sleep(self.delay)
        raise self._fail(last_error or OSError("no reading"))

    def cleanup(self) -> None:
        if self._i2c is None:
            return
        i2c, self._i2c = self._i2c, None
        try:
            i2c.deinit()
            logger.info("Released I2C bus for soil moisture sensor")
        except Exception as e:
            logger.error("Error releasing I2C bus: %s", e)
