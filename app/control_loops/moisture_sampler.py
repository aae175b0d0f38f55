"""
MoistureSampler: keeps a rolling window of soil moisture readings.
"""

import logging
from typing import Any, Callable

from app.control_loops.base import PeriodicLoop
from app.domain.moisture import MoistureHistory, MoistureSample
from app.enums.events import SensorEvent
from app.schemas.events import MoistureReadingPayload
from app.utils.event_bus import EventBus
from app.utils.time import Clock, iso_utc_seconds

logger = logging.getLogger(__name__)


class MoistureSampler(PeriodicLoop):
    name = "MoistureSampler"

    def __init__(
        self,
        read_moisture: Callable[[], int],
        history: MoistureHistory,
        event_bus: EventBus | None = None,
        *,
        interval: float = 10.0,
        clock: Clock | None = None,
    ):
        super().__init__(interval, clock)
        self.read_moisture = read_moisture
        self.history = history
        self.event_bus = event_bus

    def tick(self) -> None:
        value = int(self.read_moisture())
        timestamp = iso_utc_seconds(self.clock.utc_now())
        self.history.add(value, timestamp)
        logger.debug("Moisture %s at %s", value, timestamp)
        if self.event_bus is not None:
            self.event_bus.publish(SensorEvent.MOISTURE_READING, MoistureReadingPayload(value=value, timestamp=timestamp))

    def samples(self) -> list[MoistureSample]:
        """Newest-first copy of the history for rendering."""
        return self.history.items()

    def get_service_status(self) -> dict[str, Any]:
        status = super().get_service_status()
        latest = self.history.latest()
        status["latest"] = latest.to_dict() if latest else None
        status["samples"] = len(self.history)
        return status
