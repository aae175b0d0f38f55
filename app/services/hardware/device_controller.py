"""
Device Controller
=================
Sole authority over the water pump's on/off state.

Features:
- Debounce: a request for the state the pump is already in does nothing
- Serialization: transitions and state reads share one re-entrant lock, so
  readers never see a half-applied transition
- Side effects: relay write, log line and one ``PUMP_STATE_CHANGED`` event
  per real transition
- Relay failures propagate as DeviceIOError with the state untouched
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime
from typing import Any

from app.enums.events import DeviceEvent, TransitionSource
from app.hardware.actuators.relays import RelayBase
from app.schemas.events import PumpStatePayload
from app.utils.concurrency import synchronized
from app.utils.event_bus import EventBus
from app.utils.time import Clock, SystemClock, iso_utc_seconds

logger = logging.getLogger(__name__)


class DeviceController:
    """Owns the pump relay and its logical state."""

    def __init__(self, relay: RelayBase, event_bus: EventBus, clock: Clock | None = None):
        """
        Initialize the controller and drive the relay to a known OFF state.

        Args:
            relay: Pump relay driver
            event_bus: Bus receiving PUMP_STATE_CHANGED events
            clock: Time source for event timestamps

        Raises:
            DeviceIOError: The relay could not be driven low at startup.
        """
        self.relay = relay
        self.event_bus = event_bus
        self.clock = clock or SystemClock()
        self._lock = threading.RLock()
        self.relay.turn_off()
        self._on = False
        self._last_changed: datetime | None = None

    @synchronized
    def is_on(self) -> bool:
        return self._on

    @synchronized
    def is_off(self) -> bool:
        return not self._on

    def turn_on(self, source: TransitionSource | str = TransitionSource.API) -> bool:
        """Switch the pump on. Returns False when it was already on."""
        return self._transition(True, source)

    def turn_off(self, source: TransitionSource | str = TransitionSource.API) -> bool:
        """Switch the pump off. Returns False when it was already off."""
        return self._transition(False, source)

    @synchronized
    def _transition(self, on: bool, source: TransitionSource | str) -> bool:
        if self._on == on:
            return False

        # Raises DeviceIOError; state is only updated once the relay accepted the write
        if on:
            self.relay.turn_on()
        else:
            self.relay.turn_off()

        self._on = on
        self._last_changed = self.clock.utc_now()
        state = "on" if on else "off"
        source_name = source.value if isinstance(source, TransitionSource) else str(source)
        logger.info("Pump turned %s (%s)", state, source_name)
        self.event_bus.publish(
            DeviceEvent.PUMP_STATE_CHANGED,
            PumpStatePayload(state=state, source=source_name, timestamp=iso_utc_seconds(self._last_changed)),
        )
        return True

    @synchronized
    def status(self) -> dict[str, Any]:
        return {
            "pump": "on" if self._on else "off",
            "last_changed": iso_utc_seconds(self._last_changed) if self._last_changed else None,
        }
