"""
This file contains the base class for the pump relay.
The RelayBase class defines the common interface for all relay classes. It provides methods to drive
the relay output high or low and to release the underlying handle.
"""


class RelayBase:
    """
    Base class for all relay types.

    Attributes:
        device (str): The name of the device controlled by the relay.

    Methods:
        turn_on(): Drives the relay output high. (Implemented in subclasses)
        turn_off(): Drives the relay output low. (Implemented in subclasses)
        cleanup(): Releases the output. Must be safe to call more than once.
    """

    def __init__(self, device: str):
        """
        Initializes the relay with a device name.

        Args:
            device (str): The name of the device controlled by the relay.
        """
        self.device = device

    def turn_on(self) -> None:
        """Drives the relay high. Raises DeviceIOError on failure."""
        raise NotImplementedError("Subclasses must implement turn_on method")

    def turn_off(self) -> None:
        """Drives the relay low. Raises DeviceIOError on failure."""
        raise NotImplementedError("Subclasses must implement turn_off method")

    def cleanup(self) -> None:
        """Releases hardware resources held by the relay."""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.cleanup()
