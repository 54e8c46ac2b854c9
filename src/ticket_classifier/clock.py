"""
Clock abstraction for TTL and throttle-window computations.

Components take a Clock at construction so tests can drive time explicitly
instead of sleeping.
"""

import time
from typing import Protocol


class Clock(Protocol):
    """Source of the current time in seconds."""

    def now(self) -> float:
        ...


class SystemClock:
    """Wall-clock time (time.time)."""

    def now(self) -> float:
        return time.time()
