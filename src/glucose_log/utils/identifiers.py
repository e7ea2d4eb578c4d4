"""
Reading ID generation utilities.

IDs are creation-time derived (epoch milliseconds) and bumped when two
readings are created within the same millisecond.
"""

import time
from collections.abc import Callable


def current_epoch_ms() -> int:
    """Return the current wall-clock time in epoch milliseconds."""
    return time.time_ns() // 1_000_000


class ReadingIdGenerator:
    """Produce strictly increasing, creation-time derived reading IDs."""

    def __init__(self, clock: Callable[[], int] = current_epoch_ms) -> None:
        """
        Initialize the generator.

        Args:
            clock: Callable returning the current time in epoch milliseconds.
        """
        self._clock = clock
        self._last_id = 0

    def seed(self, existing_ids: list[int]) -> None:
        """Make sure future IDs are greater than every ID already in use."""
        if existing_ids:
            self._last_id = max(self._last_id, max(existing_ids))

    def next_id(self) -> int:
        """Return a new ID greater than any previously issued one."""
        candidate = self._clock()
        if candidate <= self._last_id:
            candidate = self._last_id + 1
        self._last_id = candidate
        return candidate
