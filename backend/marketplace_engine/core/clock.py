"""
Clock abstractions.

Lifecycle and auction timing read the current time only through a
``Clock`` so tests can fast-forward simulated time instead of sleeping.
"""
from datetime import datetime, timedelta, timezone
from typing import Protocol


class Clock(Protocol):
    """Source of the current time (timezone-aware UTC)."""

    def now(self) -> datetime:
        ...


class SystemClock:
    """Wall-clock time."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class ManualClock:
    """
    Clock that only moves when told to.

    Usage:
        clock = ManualClock(datetime(2025, 1, 1, tzinfo=timezone.utc))
        clock.advance(minutes=5)
    """

    def __init__(self, start: datetime | None = None):
        self._now = as_utc(start or datetime(2025, 1, 1, tzinfo=timezone.utc))

    def now(self) -> datetime:
        return self._now

    def advance(self, delta: timedelta | None = None, **kwargs) -> datetime:
        """Move time forward by ``delta`` or by timedelta keyword arguments."""
        step = delta if delta is not None else timedelta(**kwargs)
        if step < timedelta(0):
            raise ValueError("ManualClock cannot move backwards")
        self._now = self._now + step
        return self._now

    def set(self, moment: datetime) -> None:
        self._now = as_utc(moment)


def as_utc(moment: datetime) -> datetime:
    """Treat a naive datetime as UTC; aware datetimes pass through."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment
