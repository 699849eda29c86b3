"""Tests for the rolling completion rate, daily series and chart periods."""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from habitstreak.errors import ValidationError
from habitstreak.services.stats import (
    ChartPeriod,
    check_ins_in_period,
    completion_rate,
    completions_on,
    daily_series,
)

from tests.conftest import START


def _every_day(days: int):
    return [START - timedelta(days=offset) for offset in range(days)]


class TestCompletionRate:
    def test_no_check_ins_is_zero(self, habit_factory, clock):
        habit = habit_factory()

        assert completion_rate(habit, 14, now=START, clock=clock) == 0.0

    def test_every_day_in_window_is_one(self, habit_factory, clock):
        habit = habit_factory(check_ins=_every_day(14))

        assert completion_rate(habit, 14, now=START, clock=clock) == 1.0

    def test_same_day_duplicates_count_once(self, habit_factory, clock):
        habit = habit_factory(check_ins=[START, START + timedelta(hours=1), START])

        assert completion_rate(habit, 14, now=START, clock=clock) == pytest.approx(1 / 14)

    def test_check_ins_outside_window_ignored(self, habit_factory, clock):
        habit = habit_factory(
            check_ins=[START - timedelta(days=14), START + timedelta(days=1), START]
        )

        assert completion_rate(habit, 14, now=START, clock=clock) == pytest.approx(1 / 14)

    def test_denominator_is_window_even_for_new_habit(self, habit_factory, clock):
        habit = habit_factory(created_at=START, check_ins=[START])

        assert completion_rate(habit, 7, now=START, clock=clock) == pytest.approx(1 / 7)

    def test_default_window_is_fourteen_days(self, habit_factory, clock):
        habit = habit_factory(check_ins=_every_day(7))

        assert completion_rate(habit, now=START, clock=clock) == pytest.approx(0.5)

    @pytest.mark.parametrize("days", [0, -3])
    def test_rejects_empty_window(self, habit_factory, clock, days):
        with pytest.raises(ValidationError):
            completion_rate(habit_factory(), days, now=START, clock=clock)


class TestDailySeries:
    @pytest.mark.parametrize("days", [1, 7, 14, 90])
    def test_length_and_strict_order(self, habit_factory, clock, days):
        series = daily_series(habit_factory(check_ins=_every_day(3)), days, now=START, clock=clock)

        assert len(series) == days
        assert all(a[0] < b[0] for a, b in zip(series, series[1:]))
        assert series[-1][0] == START.date()
        assert series[0][0] == START.date() - timedelta(days=days - 1)

    def test_flags_mark_completed_days(self, habit_factory, clock):
        habit = habit_factory(check_ins=[START, START - timedelta(days=2)])

        series = daily_series(habit, 4, now=START, clock=clock)

        assert series == [
            (date(2025, 1, 3), 0),
            (date(2025, 1, 4), 1),
            (date(2025, 1, 5), 0),
            (date(2025, 1, 6), 1),
        ]

    def test_recomputation_is_idempotent(self, habit_factory, clock):
        habit = habit_factory(check_ins=_every_day(5))

        first = daily_series(habit, 10, now=START, clock=clock)
        assert daily_series(habit, 10, now=START, clock=clock) == first


class TestPeriods:
    def test_chart_period_days(self):
        assert [p.days for p in ChartPeriod] == [7, 30, 90]

    def test_check_ins_in_week(self, habit_factory, clock):
        inside = START - timedelta(days=6)
        outside = START - timedelta(days=6, minutes=1)
        habit = habit_factory(check_ins=[outside, inside, START])

        assert check_ins_in_period(habit, ChartPeriod.WEEK, now=START, clock=clock) == [inside, START]

    def test_completions_on_counts_taps_for_one_day(self, habit_factory, clock):
        habit = habit_factory(
            check_ins=[START, START + timedelta(hours=3), START - timedelta(days=1)]
        )

        assert completions_on(habit, START.date(), clock=clock) == 2
        assert completions_on(habit, date(2025, 1, 1), clock=clock) == 0
