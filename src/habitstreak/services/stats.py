"""Completion statistics over a habit's check-in log."""

from __future__ import annotations

from datetime import date, datetime, timedelta
from enum import Enum
from typing import Iterable, Optional

from ..clock import Clock, default_clock
from ..errors import ValidationError
from ..models.habit import Habit

DEFAULT_WINDOW_DAYS = 14


class ChartPeriod(Enum):
    """Lookback periods offered by the history chart."""

    WEEK = 7
    MONTH = 30
    QUARTER = 90

    @property
    def days(self) -> int:
        return self.value


def _window(days: int, now: Optional[datetime], clock: Optional[Clock]) -> tuple[date, date, Clock]:
    if isinstance(days, bool) or not isinstance(days, int) or days < 1:
        raise ValidationError(f"Window must be a positive number of days, got {days!r}")
    clock = clock or default_clock()
    end = clock.local_date(now if now is not None else clock.now())
    return end - timedelta(days=days - 1), end, clock


def completed_days(habit: Habit, *, clock: Optional[Clock] = None) -> set[date]:
    """Distinct calendar days with at least one check-in."""

    clock = clock or default_clock()
    return {clock.local_date(moment) for moment in habit.check_ins}


def completion_rate(
    habit: Habit,
    days: int = DEFAULT_WINDOW_DAYS,
    *,
    now: Optional[datetime] = None,
    clock: Optional[Clock] = None,
) -> float:
    """Fraction of the last ``days`` calendar days with a check-in.

    The denominator is always ``days``, including days before the habit
    existed.
    """

    start, end, clock = _window(days, now, clock)
    hits = sum(1 for day in completed_days(habit, clock=clock) if start <= day <= end)
    return hits / days


def daily_series(
    habit: Habit,
    days: int = DEFAULT_WINDOW_DAYS,
    *,
    now: Optional[datetime] = None,
    clock: Optional[Clock] = None,
) -> list[tuple[date, int]]:
    """One ``(day, flag)`` pair per day of the window, oldest first."""

    start, _, clock = _window(days, now, clock)
    done = completed_days(habit, clock=clock)
    series = []
    for offset in range(days):
        day = start + timedelta(days=offset)
        series.append((day, 1 if day in done else 0))
    return series


def check_ins_in_period(
    habit: Habit,
    period: ChartPeriod,
    *,
    now: Optional[datetime] = None,
    clock: Optional[Clock] = None,
) -> list[datetime]:
    """Raw check-ins no older than ``period.days - 1`` days before ``now``."""

    clock = clock or default_clock()
    now = now if now is not None else clock.now()
    cutoff = now - timedelta(days=period.days - 1)
    return [moment for moment in habit.check_ins if moment >= cutoff]


def completions_on(habit: Habit, day: date, *, clock: Optional[Clock] = None) -> int:
    """How many check-ins fall on calendar ``day``."""

    clock = clock or default_clock()
    return sum(1 for moment in habit.check_ins if clock.local_date(moment) == day)


def compute_streaks(days: Iterable[date], *, today: date) -> tuple[int, int]:
    """Return (current_run, longest_run) of consecutive days."""

    done = set(days)

    # Current run: walk backwards from today until a gap.
    current = 0
    cursor = today
    while cursor in done:
        current += 1
        cursor -= timedelta(days=1)

    longest = 0
    run = 0
    last_day: date | None = None
    for day in sorted(done):
        if last_day is not None and day == last_day + timedelta(days=1):
            run += 1
        else:
            run = 1
        longest = max(longest, run)
        last_day = day

    return current, longest


def log_streaks(
    habit: Habit, *, now: Optional[datetime] = None, clock: Optional[Clock] = None
) -> tuple[int, int]:
    """Streaks recomputed from the log, independent of the cached counter."""

    clock = clock or default_clock()
    today = clock.local_date(now if now is not None else clock.now())
    return compute_streaks(completed_days(habit, clock=clock), today=today)


__all__ = [
    "ChartPeriod",
    "DEFAULT_WINDOW_DAYS",
    "check_ins_in_period",
    "completed_days",
    "completion_rate",
    "completions_on",
    "compute_streaks",
    "daily_series",
    "log_streaks",
]
