from __future__ import annotations

import time
from typing import Protocol


class Clock(Protocol):
    """Monotonic clock abstraction.

    Core logic depends on this interface rather than calling real time directly.
    """

    def now(self) -> float:
        """Return monotonic seconds."""


class RealClock:
    """Production clock backed by time.monotonic()."""

    def now(self) -> float:
        return time.monotonic()

    def elapsed_since(self, start_s: float) -> float:
        return elapsed_since(self, start_s)


def elapsed_since(clock: Clock, start_s: float) -> float:
    """Seconds since ``start_s`` on ``clock``, never negative."""

    return max(0.0, float(clock.now()) - float(start_s))
