"""
Time sources for the customer engines.
Real runs use the wall clock; simulations and tests advance a manual clock.
"""

from datetime import datetime, timedelta
from typing import Optional


class Clock:
    """Wall-clock time source."""

    def now(self) -> datetime:
        return datetime.now()


class ManualClock(Clock):
    """Clock that only moves when told to."""

    def __init__(self, start: Optional[datetime] = None):
        self._now = start or datetime(2025, 2, 3, 6, 0)

    def now(self) -> datetime:
        return self._now

    def advance(self, days: float = 0, hours: float = 0, minutes: float = 0) -> datetime:
        self._now += timedelta(days=days, hours=hours, minutes=minutes)
        return self._now

    def set(self, moment: datetime) -> None:
        self._now = moment


def days_between(earlier: datetime, later: datetime) -> float:
    return (later - earlier).total_seconds() / 86400.0
