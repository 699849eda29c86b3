"""Habit repository protocol."""

from __future__ import annotations

from typing import Optional, Protocol

from ...models.habit import Habit


class HabitRepository(Protocol):
    """Persistence collaborator for whole habit records."""

    def get_by_id(self, habit_id: str) -> Optional[Habit]:
        """Retrieve a habit by ID."""
        ...

    def list_all(self) -> list[Habit]:
        """List every habit, newest first."""
        ...

    def create(self, habit: Habit) -> Habit:
        """Insert a new habit."""
        ...

    def update(self, habit: Habit) -> Habit:
        """Overwrite an existing habit record."""
        ...

    def save(self, habit: Habit) -> Habit:
        """Insert or overwrite a habit record."""
        ...

    def delete(self, habit_id: str) -> bool:
        """Delete a habit; False when it did not exist."""
        ...
