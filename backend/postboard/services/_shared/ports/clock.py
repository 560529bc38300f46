from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime

#: Current-time capability injected into anything that compares instants.
Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Return a timezone-aware UTC "now"."""
    return datetime.now(UTC)
