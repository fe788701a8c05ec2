from __future__ import annotations

import time
from typing import Protocol


class Clock(Protocol):
    """Source of elapsed time for the timed sessions.

    Crystal Pop and level sessions compute their remaining time from `now()`,
    never from wall-clock time.
    """

    def now(self) -> float:
        """Seconds since an arbitrary fixed origin; never goes backwards."""
        ...


class RealClock:
    """Clock used outside tests; reads time.monotonic()."""

    def now(self) -> float:
        return time.monotonic()


class FakeClock:
    """Manually driven clock for tests and scripted runs."""

    def __init__(self, *, start: float = 0.0) -> None:
        self._t = float(start)

    def now(self) -> float:
        return self._t

    def advance(self, dt: float) -> None:
        if dt < 0:
            raise ValueError("dt must be non-negative")
        self._t += float(dt)

    def advance_ms(self, ms: float) -> None:
        self.advance(float(ms) / 1000.0)

    def set(self, t: float) -> None:
        self._t = float(t)
