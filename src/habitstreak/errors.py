"""Exception hierarchy shared by the engine, repositories and CLI."""

from __future__ import annotations


class HabitError(Exception):
    """Base class for every error raised by habitstreak."""


class ValidationError(HabitError, ValueError):
    """Caller supplied input that violates a habit invariant."""


class StorageError(HabitError):
    """A persistence operation failed; nothing was committed."""


class HabitNotFoundError(HabitError, LookupError):
    """No habit exists with the requested id."""

    def __init__(self, habit_id: str):
        super().__init__(f"Habit not found: {habit_id}")
        self.habit_id = habit_id


__all__ = ["HabitError", "HabitNotFoundError", "StorageError", "ValidationError"]
