"""Tiny helpers shared across test modules."""

from __future__ import annotations

from datetime import datetime, timedelta


class FrozenClock:
    """Callable clock returning a fixed instant until advanced.

    Parameters
    ----------
    start: datetime
        Timezone-aware initial instant.
    """

    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **delta: float) -> None:
        """Move the clock forward by ``timedelta(**delta)``."""
        self.now += timedelta(**delta)
