import logging
import threading

from app.domain.exceptions import DeviceIOError

from .relay_base import RelayBase

logger = logging.getLogger(__name__)


class SimulatedRelay(RelayBase):
    """In-memory relay for development machines and tests.

    Set ``fail_writes`` to make the next writes raise DeviceIOError.
    """

    def __init__(self, device: str = "pump"):
        super().__init__(device)
        self._lock = threading.Lock()
        self.is_high = False
        self.writes: list[bool] = []
        self.fail_writes = False
        self.released = False

    def _write(self, high: bool) -> None:
        with self._lock:
            if self.fail_writes:
                raise DeviceIOError(f"Simulated write failure on relay {self.device}")
            if self.released:
                raise DeviceIOError(f"Relay {self.device} has been released")
            self.is_high = high
            self.writes.append(high)
        logger.debug("Simulated relay %s -> %s", self.device, "on" if high else "off")

    def turn_on(self) -> None:
        self._write(True)

    def turn_off(self) -> None:
        self._write(False)

    def cleanup(self) -> None:
        with self._lock:
            if self.released:
                return
            self.is_high = False
            self.released = True
        logger.info("Simulated relay %s released", self.device)
