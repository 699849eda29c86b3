"""Service layer: the habit engine and the application services around it."""

from .habits import (
    check_in,
    complete_today,
    create_habit,
    edit_habit,
    progress,
    record_completion,
    undo_last_completion,
)
from .milestones import Badge, check_milestone, earned_badges
from .stats import ChartPeriod, completion_rate, daily_series

__all__ = [
    "Badge",
    "ChartPeriod",
    "check_in",
    "check_milestone",
    "complete_today",
    "completion_rate",
    "create_habit",
    "daily_series",
    "earned_badges",
    "edit_habit",
    "progress",
    "record_completion",
    "undo_last_completion",
]
