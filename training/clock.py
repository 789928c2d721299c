from datetime import date, datetime

from django.utils import timezone


class Clock:
    """Source of "today" and "now" in the facility timezone."""

    def today(self) -> date:
        return timezone.localdate()

    def now(self) -> datetime:
        return timezone.now()


class FixedClock(Clock):
    """Clock pinned to a given date, used by tests and backfills."""

    def __init__(self, today: date, now: datetime | None = None):
        self._today = today
        self._now = now

    def today(self) -> date:
        return self._today

    def now(self) -> datetime:
        if self._now is not None:
            return self._now
        return timezone.make_aware(datetime.combine(self._today, datetime.min.time()))


default_clock = Clock()
