"""Clock abstraction: "now" plus local calendar-day arithmetic.

The engine never reads the wall clock directly. Every operation takes a
``Clock`` so tests can pin time with :class:`FixedClock`.

Calendar days are compared as ``date`` values in the clock's zone, so a day
difference is a calendar count and DST transitions (23h or 25h days) never
shift the result. Naive datetimes are treated as already being local time.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, tzinfo
from typing import Optional, Protocol
from zoneinfo import ZoneInfo


class Clock(Protocol):
    """Source of the current time and of local calendar boundaries."""

    def now(self) -> datetime:
        """Return the current moment."""
        ...

    def local_date(self, moment: datetime) -> date:
        """Return the calendar day ``moment`` falls on."""
        ...

    def start_of_day(self, moment: datetime) -> datetime:
        """Return local midnight of the day ``moment`` falls on."""
        ...

    def days_between(self, earlier: datetime, later: datetime) -> int:
        """Return the number of calendar days from ``earlier`` to ``later``."""
        ...


class CalendarClock:
    """Calendar helpers shared by the concrete clocks."""

    def __init__(self, tz: Optional[tzinfo] = None):
        self.tz = tz

    def local_date(self, moment: datetime) -> date:
        if moment.tzinfo is None:
            return moment.date()
        return moment.astimezone(self.tz).date()

    def start_of_day(self, moment: datetime) -> datetime:
        midnight = datetime.combine(self.local_date(moment), time.min)
        if moment.tzinfo is None:
            return midnight
        if self.tz is None:
            return midnight.astimezone()
        return midnight.replace(tzinfo=self.tz)

    def days_between(self, earlier: datetime, later: datetime) -> int:
        return (self.local_date(later) - self.local_date(earlier)).days


class SystemClock(CalendarClock):
    """Wall-clock time, naive local unless a zone is configured."""

    def now(self) -> datetime:
        if self.tz is None:
            return datetime.now()
        return datetime.now(self.tz)

    @classmethod
    def from_name(cls, tz_name: Optional[str]) -> "SystemClock":
        """Build a clock for an IANA zone name (``None`` means system local)."""
        return cls(ZoneInfo(tz_name) if tz_name else None)


class FixedClock(CalendarClock):
    """A settable clock for tests and replays."""

    def __init__(self, moment: datetime, tz: Optional[tzinfo] = None):
        super().__init__(tz)
        self._moment = moment

    def now(self) -> datetime:
        return self._moment

    def set(self, moment: datetime) -> None:
        self._moment = moment

    def advance(self, **delta: float) -> datetime:
        """Move the clock forward by ``timedelta(**delta)`` and return the new time."""
        self._moment = self._moment + timedelta(**delta)
        return self._moment


_default_clock: Clock = SystemClock()


def default_clock() -> Clock:
    return _default_clock


def set_default_clock(clock: Clock) -> None:
    """Replace the process-wide clock used when callers pass none."""
    global _default_clock  # noqa: PLW0603
    _default_clock = clock


__all__ = [
    "CalendarClock",
    "Clock",
    "FixedClock",
    "SystemClock",
    "default_clock",
    "set_default_clock",
]
