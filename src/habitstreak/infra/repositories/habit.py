"""SQLModel implementation of Habit repository."""

from __future__ import annotations

from typing import Optional

from sqlmodel import Session, select

from ...errors import HabitNotFoundError
from ...models.habit import Habit
from ..database import SessionFactory, storage_errors

# Columns an update may overwrite; id and created_at are fixed at creation.
_MUTABLE_FIELDS = (
    "title",
    "goal_type",
    "target_count",
    "due_date",
    "last_completed_at",
    "streak",
)


def _copy_into(row: Habit, habit: Habit) -> None:
    for name in _MUTABLE_FIELDS:
        setattr(row, name, getattr(habit, name))
    row.check_ins = list(habit.check_ins)


class SQLModelHabitRepository:
    """SQLModel-based habit repository implementation.

    Records are written whole: the caller's object is never attached to a
    session, so a failed commit leaves both the database row and the
    caller's copy as they were.
    """

    def __init__(self, session_factory: SessionFactory):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def get_by_id(self, habit_id: str) -> Optional[Habit]:
        """Retrieve a habit by ID."""
        with storage_errors("load habit"), self.session_factory() as session:
            obj = session.get(Habit, habit_id)
            if obj:
                session.expunge(obj)
            return obj

    def list_all(self) -> list[Habit]:
        """List every habit, newest first."""
        with storage_errors("list habits"), self.session_factory() as session:
            statement = select(Habit).order_by(Habit.created_at.desc())  # type: ignore[attr-defined]
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def create(self, habit: Habit) -> Habit:
        """Insert a new habit."""
        with storage_errors("create habit"), self.session_factory() as session:
            session.add(habit.copy_record())
            session.commit()
        return habit

    def update(self, habit: Habit) -> Habit:
        """Overwrite an existing habit record."""
        with storage_errors("update habit"), self.session_factory() as session:
            row = self._require(session, habit.id)
            _copy_into(row, habit)
            session.add(row)
            session.commit()
        return habit

    def save(self, habit: Habit) -> Habit:
        """Insert or overwrite a habit record."""
        with storage_errors("save habit"), self.session_factory() as session:
            row = session.get(Habit, habit.id)
            if row is None:
                session.add(habit.copy_record())
            else:
                _copy_into(row, habit)
                session.add(row)
            session.commit()
        return habit

    def delete(self, habit_id: str) -> bool:
        """Delete a habit by ID."""
        with storage_errors("delete habit"), self.session_factory() as session:
            row = session.get(Habit, habit_id)
            if row is None:
                return False
            session.delete(row)
            session.commit()
            return True

    @staticmethod
    def _require(session: Session, habit_id: str) -> Habit:
        row = session.get(Habit, habit_id)
        if row is None:
            raise HabitNotFoundError(habit_id)
        return row


__all__ = ["SQLModelHabitRepository"]
