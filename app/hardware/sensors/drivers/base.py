"""
Base class for all hardware sensor drivers.
Provides the narrow interface the control loops rely on.
"""

from app.domain.exceptions import SensorIOError


class BaseSensorDriver:
    """
    Abstract base class for sensor drivers.
    All drivers should inherit from this and implement the read() method.
    """

    name = "sensor"

    def read(self) -> int:
        """
        Read the current value from the sensor.

        Returns:
            int: Sensor value in the driver's native unit.

        Raises:
            SensorIOError: The hardware could not be read.
        """
        raise NotImplementedError("read() must be implemented by subclasses.")

    def cleanup(self) -> None:
        """
        Optional cleanup for hardware resources. Must be idempotent.
        """

    def _fail(self, error: Exception) -> SensorIOError:
        return SensorIOError(f"{self.name} read failed: {error}")
