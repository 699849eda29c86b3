"""Habit engine: streak updates, check-ins, undo and goal progress.

Every function here works on an in-memory :class:`Habit` and never touches
storage. Callers persist the habit afterwards (see ``services.tracker``).
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..clock import Clock, default_clock
from ..errors import ValidationError
from ..logging_config import get_logger
from ..models.habit import GoalType, Habit

logger = get_logger("services.habits")

# Count used for progress when a habit has no usable goal value
FALLBACK_TARGET = 10
PROGRESS_STAGES = (0.2, 0.4, 0.6, 0.8, 1.0)


def _resolve(now: Optional[datetime], clock: Optional[Clock]) -> tuple[datetime, Clock]:
    clock = clock or default_clock()
    return (now if now is not None else clock.now()), clock


def _align(moment: Optional[datetime], now: datetime, clock: Clock) -> Optional[datetime]:
    """Give ``moment`` the same naive/aware form as ``now``.

    A naive date typed by the user is read in the clock's zone; an aware
    one is turned into naive local time when the clock is naive.
    """

    if moment is None or (moment.tzinfo is None) == (now.tzinfo is None):
        return moment
    if moment.tzinfo is None:
        return moment.replace(tzinfo=getattr(clock, "tz", None) or now.tzinfo)
    return moment.astimezone().replace(tzinfo=None)


def _clean_title(title: Optional[str]) -> str:
    trimmed = (title or "").strip()
    if not trimmed:
        raise ValidationError("Title is required")
    return trimmed


def _check_goal(
    goal_type: GoalType,
    target_count: Optional[int],
    due_date: Optional[datetime],
    now: datetime,
    require_future: bool = True,
) -> None:
    if goal_type == GoalType.COUNT:
        if target_count is None or isinstance(target_count, bool) or target_count <= 0:
            raise ValidationError("Target count must be a positive integer")
    else:
        if due_date is None:
            raise ValidationError("Due date is required for date goals")
        if require_future and due_date <= now:
            raise ValidationError("Due date must be later than now")


def validate_habit(habit: Habit) -> None:
    """Raise ``ValidationError`` when a stored habit breaks its goal invariant.

    Only the shape of the record is checked. A due date that has since passed
    is still valid; it only had to be in the future when it was set.
    """

    _clean_title(habit.title)
    if habit.streak < 0:
        raise ValidationError("Streak cannot be negative")
    if habit.goal_type == GoalType.COUNT:
        if habit.due_date is not None:
            raise ValidationError("Count goals cannot carry a due date")
        target = habit.target_count
        if target is None or target <= 0:
            raise ValidationError("Target count must be a positive integer")
    elif habit.target_count is not None:
        raise ValidationError("Date goals cannot carry a target count")


def create_habit(
    title: str,
    goal_type: GoalType = GoalType.DATE,
    *,
    target_count: Optional[int] = None,
    due_date: Optional[datetime] = None,
    now: Optional[datetime] = None,
    clock: Optional[Clock] = None,
) -> Habit:
    """Build a new, validated habit with an empty log and zero streak."""

    now, clock = _resolve(now, clock)
    goal_type = GoalType(goal_type)
    clean = _clean_title(title)
    due_date = _align(due_date, now, clock)
    _check_goal(goal_type, target_count, due_date, now)

    habit = Habit(
        title=clean,
        created_at=now,
        goal_type=goal_type,
        target_count=target_count if goal_type == GoalType.COUNT else None,
        due_date=due_date if goal_type == GoalType.DATE else None,
        streak=0,
        check_ins=[],
    )
    logger.info("Habit created", extra={"habit_id": habit.id, "goal_type": goal_type.value})
    return habit


def edit_habit(
    habit: Habit,
    *,
    title: Optional[str] = None,
    goal_type: Optional[GoalType] = None,
    target_count: Optional[int] = None,
    due_date: Optional[datetime] = None,
    now: Optional[datetime] = None,
    clock: Optional[Clock] = None,
) -> Habit:
    """Apply an edit in place; the habit is untouched if validation fails.

    Switching goal type clears the field of the old goal. A goal value that
    is not given keeps its current value. Only a newly set due date has to
    lie in the future, so an expired habit can still be renamed.
    """

    now, clock = _resolve(now, clock)
    due_date = _align(due_date, now, clock)
    new_title = _clean_title(habit.title if title is None else title)
    new_type = GoalType(goal_type) if goal_type is not None else habit.goal_type

    if new_type == GoalType.COUNT:
        new_target = target_count if target_count is not None else habit.target_count
        new_due = None
    else:
        new_target = None
        new_due = due_date if due_date is not None else habit.due_date
    due_is_new = due_date is not None or habit.goal_type != GoalType.DATE
    _check_goal(new_type, new_target, new_due, now, require_future=due_is_new)

    habit.title = new_title
    habit.goal_type = new_type
    habit.target_count = new_target
    habit.due_date = new_due
    logger.info("Habit edited", extra={"habit_id": habit.id})
    return habit


def _apply_streak_rule(habit: Habit, now: datetime, clock: Clock) -> bool:
    last = habit.last_completed_at
    if last is None:
        habit.streak = 1
        return True

    gap = clock.days_between(last, now)
    if gap == 0:
        return False
    if gap == 1:
        habit.streak += 1
    else:
        # Missed days, or a last completion dated in the future
        logger.info(
            "Streak reset",
            extra={"habit_id": habit.id, "previous_streak": habit.streak, "gap_days": gap},
        )
        habit.streak = 1
    return True


def complete_today(
    habit: Habit, *, now: Optional[datetime] = None, clock: Optional[Clock] = None
) -> bool:
    """Advance the day streak for a completion at ``now``.

    Returns False (and changes nothing) if the habit was already completed
    on the same calendar day. This does not append to ``check_ins``.
    """

    now, clock = _resolve(now, clock)
    validate_habit(habit)
    changed = _apply_streak_rule(habit, now, clock)
    if changed:
        habit.last_completed_at = now
    return changed


def record_completion(
    habit: Habit, *, now: Optional[datetime] = None, clock: Optional[Clock] = None
) -> datetime:
    """Append ``now`` to the log without any streak logic or same-day dedup."""

    now, _ = _resolve(now, clock)
    validate_habit(habit)
    habit.check_ins.append(now)
    habit.last_completed_at = now
    return now


def check_in(
    habit: Habit,
    *,
    now: Optional[datetime] = None,
    clock: Optional[Clock] = None,
    count_toward_streak: bool = True,
) -> bool:
    """Log one completion and, if asked, apply the day-streak rule.

    This is the single mutation path used by the application. The log entry
    is always appended; the streak rule runs against the previous
    ``last_completed_at`` before it is overwritten. Returns True when the
    streak counter was changed.
    """

    now, clock = _resolve(now, clock)
    validate_habit(habit)
    changed = _apply_streak_rule(habit, now, clock) if count_toward_streak else False
    habit.check_ins.append(now)
    habit.last_completed_at = now
    logger.info(
        "Check-in recorded",
        extra={
            "habit_id": habit.id,
            "streak": habit.streak,
            "completion_count": habit.completion_count,
            "counted": count_toward_streak,
        },
    )
    return changed


def undo_last_completion(habit: Habit) -> Optional[datetime]:
    """Remove the most recently inserted check-in and return it.

    Removal is by insertion position, not by the largest timestamp. The
    cached streak and ``last_completed_at`` are left as they are.
    """

    if not habit.check_ins:
        return None
    removed = habit.check_ins.pop()
    logger.info("Check-in undone", extra={"habit_id": habit.id, "removed": removed})
    return removed


def progress(
    habit: Habit, *, now: Optional[datetime] = None, clock: Optional[Clock] = None
) -> float:
    """Return goal progress in [0, 1]; recomputed on every call."""

    def fallback() -> float:
        return min(habit.completion_count / FALLBACK_TARGET, 1.0)

    if habit.goal_type == GoalType.COUNT:
        target = habit.target_count
        if target is not None and target > 0:
            return min(habit.completion_count / target, 1.0)
        return fallback()

    due = habit.due_date
    if due is None:
        return fallback()

    now, _ = _resolve(now, clock)
    start = habit.created_at
    if now >= due:
        return 1.0
    if now <= start:
        return 0.0
    total = (due - start).total_seconds()
    elapsed = (now - start).total_seconds()
    return max(0.0, min(elapsed / total, 1.0))


def stage_value(habit: Habit) -> int:
    """Number shown next to the progress bar: completions or streak."""

    if habit.goal_type == GoalType.COUNT:
        return habit.completion_count
    return habit.streak


def unlocked_stages(
    habit: Habit, *, now: Optional[datetime] = None, clock: Optional[Clock] = None
) -> list[float]:
    value = progress(habit, now=now, clock=clock)
    return [ratio for ratio in PROGRESS_STAGES if value >= ratio]


__all__ = [
    "FALLBACK_TARGET",
    "PROGRESS_STAGES",
    "check_in",
    "complete_today",
    "create_habit",
    "edit_habit",
    "progress",
    "record_completion",
    "stage_value",
    "undo_last_completion",
    "unlocked_stages",
    "validate_habit",
]
