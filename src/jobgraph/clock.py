"""Clock implementations."""

import time


class SystemClock:
    """Wall clock in whole UTC seconds since the epoch."""

    def now(self) -> int:
        return int(time.time())


class ManualClock:
    """Clock that only moves when told to. Used by tests and simulated runs."""

    def __init__(self, start: int = 0):
        self._now = start

    def now(self) -> int:
        return self._now

    def set(self, timestamp: int) -> None:
        """Jump to ``timestamp``. Time never runs backwards."""
        if timestamp < self._now:
            raise ValueError(f"Cannot move clock backwards from {self._now} to {timestamp}")
        self._now = timestamp

    def advance(self, seconds: int) -> int:
        """Move forward by ``seconds`` and return the new time."""
        if seconds < 0:
            raise ValueError("Cannot advance clock by a negative amount")
        self._now += seconds
        return self._now
