"""SQLModel table exports."""

from .habit import CheckInLog, GoalType, Habit, Timestamp
from .settings import AppSetting

__all__ = [
    "AppSetting",
    "CheckInLog",
    "GoalType",
    "Habit",
    "Timestamp",
]
