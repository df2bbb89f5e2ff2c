"""
Block timestamp sources.

The contract never reads wall-clock time directly; it asks a clock for the
timestamp of the current block, in whole seconds since the epoch.
"""

import time
from typing import Protocol, runtime_checkable

SECONDS_PER_DAY = 86_400


def day_of(timestamp: int) -> int:
    """Quota day of a timestamp."""
    return timestamp // SECONDS_PER_DAY


@runtime_checkable
class Clock(Protocol):
    """Anything that can report the current block timestamp."""

    def now(self) -> int:
        ...


class SystemClock:
    """Clock backed by the host's wall clock."""

    def now(self) -> int:
        return int(time.time())


class ManualClock:
    """Clock that only moves when told to."""

    def __init__(self, start: int = 0):
        self._now = start

    def now(self) -> int:
        return self._now

    def set(self, timestamp: int) -> None:
        if timestamp < 0:
            raise ValueError("Timestamp must be non-negative")
        self._now = timestamp

    def advance(self, seconds: int) -> int:
        self.set(self._now + seconds)
        return self._now

    def advance_days(self, days: int = 1) -> int:
        return self.advance(days * SECONDS_PER_DAY)
