"""Persistent state of one simulated rover."""

from dataclasses import dataclass
from typing import Any


@dataclass(slots=True)
class DeviceState:
    """Everything a simulated rover remembers between requests.

    One instance per DeviceServer. Not locked: requests are handled on a
    single event loop and each mutation runs to completion before the
    next request is dispatched.
    """

    distance: int = 0
    last_move: dict[str, Any] | None = None
    last_look: dict[str, Any] | None = None

    def advance_distance(self, delta: int) -> int:
        """Add *delta* to the cumulative distance and return the new total."""
        self.distance += delta
        return self.distance
