"""Tests for logging completions and undoing them."""

from __future__ import annotations

from datetime import timedelta

import pytest

from habitstreak.errors import ValidationError
from habitstreak.models import GoalType
from habitstreak.services.habits import (
    check_in,
    complete_today,
    record_completion,
    undo_last_completion,
)

from tests.conftest import START


class TestRecordCompletion:
    """``record_completion`` logs every tap and ignores the streak."""

    def test_appends_every_call_even_on_same_day(self, habit_factory):
        habit = habit_factory(goal_type=GoalType.COUNT)

        for minutes in (0, 5, 10):
            record_completion(habit, now=START + timedelta(minutes=minutes))

        assert habit.completion_count == 3
        assert habit.last_completed_at == START + timedelta(minutes=10)
        assert habit.streak == 0

    def test_rejects_count_habit_without_target(self, habit_factory):
        habit = habit_factory(goal_type=GoalType.COUNT, target_count=0)

        with pytest.raises(ValidationError):
            record_completion(habit, now=START)
        assert habit.check_ins == []


class TestUnifiedCheckIn:
    def test_counts_toward_streak_by_default(self, habit_factory, clock):
        habit = habit_factory()

        assert check_in(habit, now=START, clock=clock) is True
        assert habit.streak == 1
        assert habit.check_ins == [START]
        assert habit.last_completed_at == START

    def test_second_check_in_same_day_logs_but_keeps_streak(self, habit_factory, clock):
        habit = habit_factory()
        check_in(habit, now=START, clock=clock)

        assert check_in(habit, now=START + timedelta(hours=2), clock=clock) is False
        assert habit.streak == 1
        assert habit.completion_count == 2

    def test_next_day_extends_streak(self, habit_factory, clock):
        habit = habit_factory()
        check_in(habit, now=START, clock=clock)
        check_in(habit, now=START + timedelta(days=1), clock=clock)

        assert habit.streak == 2
        assert habit.completion_count == 2

    def test_policy_flag_off_never_changes_streak(self, habit_factory, clock):
        habit = habit_factory(streak=4, last_completed_at=START - timedelta(days=1))

        for offset in (0, 3, 9):
            check_in(habit, now=START + timedelta(days=offset), clock=clock, count_toward_streak=False)

        assert habit.streak == 4
        assert habit.completion_count == 3
        assert habit.last_completed_at == START + timedelta(days=9)

    def test_uncounted_check_in_still_blocks_same_day_streak(self, habit_factory, clock):
        """The streak rule sees ``last_completed_at`` from any check-in."""
        habit = habit_factory(streak=2, last_completed_at=START - timedelta(days=1))
        check_in(habit, now=START, clock=clock, count_toward_streak=False)

        check_in(habit, now=START + timedelta(hours=1), clock=clock)

        assert habit.streak == 2

    def test_invalid_habit_is_rejected_without_mutation(self, habit_factory, clock):
        habit = habit_factory()
        habit.title = "   "

        with pytest.raises(ValidationError):
            check_in(habit, now=START, clock=clock)
        assert habit.check_ins == []
        assert habit.streak == 0

    def test_date_goal_with_target_count_is_rejected(self, habit_factory, clock):
        habit = habit_factory()
        habit.target_count = 5

        with pytest.raises(ValidationError):
            complete_today(habit, now=START, clock=clock)


class TestUndo:
    def test_removes_last_inserted_entry(self, habit_factory, clock):
        habit = habit_factory()
        check_in(habit, now=START, clock=clock)
        check_in(habit, now=START + timedelta(days=1), clock=clock)

        removed = undo_last_completion(habit)

        assert removed == START + timedelta(days=1)
        assert habit.check_ins == [START]

    def test_does_not_reverse_streak(self, habit_factory, clock):
        habit = habit_factory()
        check_in(habit, now=START, clock=clock)
        check_in(habit, now=START + timedelta(days=1), clock=clock)

        undo_last_completion(habit)

        assert habit.streak == 2
        assert habit.last_completed_at == START + timedelta(days=1)

    def test_removes_by_position_not_latest_timestamp(self, habit_factory):
        late = START + timedelta(days=3)
        early = START - timedelta(days=3)
        habit = habit_factory(check_ins=[late, START, early])

        assert undo_last_completion(habit) == early
        assert habit.check_ins == [late, START]

    def test_empty_log_returns_none(self, habit_factory):
        habit = habit_factory()

        assert undo_last_completion(habit) is None
        assert habit.check_ins == []
