"""Application service tying the habit engine to persistence."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..clock import Clock, default_clock
from ..domain.repositories import HabitRepository
from ..errors import HabitNotFoundError, ValidationError
from ..logging_config import get_logger
from ..models.habit import GoalType, Habit
from . import habits as engine
from . import stats
from .milestones import Badge, check_milestone, earned_badges, praise

logger = get_logger("services.tracker")


@dataclass
class CheckInResult:
    """Outcome of one check-in as shown to the user."""

    habit: Habit
    streak_changed: bool
    badge: Optional[Badge]
    message: str


@dataclass
class HabitSummary:
    """Read-only figures the presentation layer renders for a habit."""

    habit: Habit
    progress: float
    completion_rate: float
    series: list[tuple[date, int]]
    today_count: int
    longest_streak: int
    badges: list[Badge] = field(default_factory=list)

    @property
    def display_streak(self) -> str:
        return self.habit.display_streak


class HabitTracker:
    """Load, mutate and save habits one operation at a time.

    Each mutating call holds a lock for its habit id, so check-ins, undos
    and edits on the same habit never interleave. A ``StorageError`` from
    the repository propagates unchanged; because the habit is reloaded for
    every operation, the failed change is simply dropped.
    """

    def __init__(self, habit_repo: HabitRepository, *, clock: Optional[Clock] = None):
        self.habits = habit_repo
        self.clock = clock or default_clock()
        self._locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def _lock_for(self, habit_id: str) -> threading.Lock:
        with self._locks_guard:
            return self._locks.setdefault(habit_id, threading.Lock())

    # Queries
    def list_habits(self) -> list[Habit]:
        return self.habits.list_all()

    def get(self, ref: str) -> Habit:
        """Find a habit by full id or by a unique id prefix."""

        ref = (ref or "").strip()
        if not ref:
            raise HabitNotFoundError(ref)
        habit = self.habits.get_by_id(ref)
        if habit is not None:
            return habit

        matches = [h for h in self.habits.list_all() if h.id.startswith(ref)]
        if len(matches) == 1:
            return matches[0]
        if len(matches) > 1:
            raise ValidationError(f"Ambiguous habit id prefix: {ref}")
        raise HabitNotFoundError(ref)

    def summary(self, ref: str, days: int = stats.DEFAULT_WINDOW_DAYS) -> HabitSummary:
        habit = self.get(ref)
        now = self.clock.now()
        _, longest = stats.log_streaks(habit, now=now, clock=self.clock)
        return HabitSummary(
            habit=habit,
            progress=engine.progress(habit, now=now, clock=self.clock),
            completion_rate=stats.completion_rate(habit, days, now=now, clock=self.clock),
            series=stats.daily_series(habit, days, now=now, clock=self.clock),
            today_count=stats.completions_on(habit, self.clock.local_date(now), clock=self.clock),
            longest_streak=longest,
            badges=earned_badges(habit),
        )

    # Mutations
    def add(
        self,
        title: str,
        goal_type: GoalType = GoalType.DATE,
        *,
        target_count: Optional[int] = None,
        due_date: Optional[datetime] = None,
    ) -> Habit:
        habit = engine.create_habit(
            title,
            goal_type,
            target_count=target_count,
            due_date=due_date,
            now=self.clock.now(),
            clock=self.clock,
        )
        return self.habits.create(habit)

    def check_in(self, ref: str, *, count_toward_streak: bool = True) -> CheckInResult:
        habit_id = self.get(ref).id
        with self._lock_for(habit_id):
            habit = self.get(habit_id)
            changed = engine.check_in(
                habit,
                now=self.clock.now(),
                clock=self.clock,
                count_toward_streak=count_toward_streak,
            )
            self.habits.update(habit)

        badge = check_milestone(habit)
        if badge is not None:
            logger.info(
                "Milestone reached",
                extra={"habit_id": habit.id, "badge": badge.label, "kind": badge.kind.value},
            )
        return CheckInResult(
            habit=habit,
            streak_changed=changed,
            badge=badge,
            message=praise(habit.streak),
        )

    def undo(self, ref: str) -> tuple[Habit, Optional[datetime]]:
        habit_id = self.get(ref).id
        with self._lock_for(habit_id):
            habit = self.get(habit_id)
            removed = engine.undo_last_completion(habit)
            if removed is not None:
                self.habits.update(habit)
        return habit, removed

    def edit(self, ref: str, **changes) -> Habit:
        habit_id = self.get(ref).id
        with self._lock_for(habit_id):
            habit = self.get(habit_id)
            engine.edit_habit(habit, now=self.clock.now(), clock=self.clock, **changes)
            return self.habits.update(habit)

    def delete(self, ref: str) -> Habit:
        habit = self.get(ref)
        with self._lock_for(habit.id):
            if not self.habits.delete(habit.id):
                raise HabitNotFoundError(habit.id)
        with self._locks_guard:
            self._locks.pop(habit.id, None)
        logger.info("Habit deleted", extra={"habit_id": habit.id})
        return habit


__all__ = ["CheckInResult", "HabitSummary", "HabitTracker"]
