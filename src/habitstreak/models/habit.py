"""Habit tracking data structures."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, ClassVar, List, Optional
from uuid import uuid4

from sqlalchemy import JSON, Column, String
from sqlalchemy.ext.mutable import MutableList
from sqlalchemy.types import TypeDecorator
from sqlmodel import Field, SQLModel


class GoalType(str, Enum):
    """Which goal field of a habit is active."""

    COUNT = "count"
    DATE = "date"


class CheckInLog(TypeDecorator):
    """Ordered list of completion timestamps stored as ISO-8601 strings."""

    impl = JSON
    cache_ok = True

    def process_bind_param(self, value: Any, dialect: Any) -> list[str]:
        if not value:
            return []
        return [moment.isoformat() for moment in value]

    def process_result_value(self, value: Any, dialect: Any) -> list[datetime]:
        if not value:
            return []
        return [datetime.fromisoformat(item) for item in value]


class Timestamp(TypeDecorator):
    """One datetime stored as ISO-8601 text, naive or aware exactly as given.

    Ordering on the column is text ordering, which matches time order for
    values written under one convention.
    """

    impl = String(40)
    cache_ok = True

    def process_bind_param(self, value: Any, dialect: Any) -> Optional[str]:
        if value is None:
            return None
        return value.isoformat()

    def process_result_value(self, value: Any, dialect: Any) -> Optional[datetime]:
        if value is None:
            return None
        return datetime.fromisoformat(value)


def _new_habit_id() -> str:
    return uuid4().hex


class Habit(SQLModel, table=True):
    """A user-defined habit with a count or deadline goal and a day streak."""

    __tablename__: ClassVar[str] = "habit"

    id: str = Field(default_factory=_new_habit_id, primary_key=True, max_length=32)
    title: str = Field(nullable=False, max_length=120, index=True)
    created_at: datetime = Field(
        default_factory=datetime.now, sa_column=Column(Timestamp, nullable=False)
    )
    goal_type: GoalType = Field(default=GoalType.DATE, nullable=False)
    target_count: Optional[int] = Field(default=None)
    due_date: Optional[datetime] = Field(default=None, sa_column=Column(Timestamp))
    last_completed_at: Optional[datetime] = Field(default=None, sa_column=Column(Timestamp))
    streak: int = Field(default=0, nullable=False)
    # Insertion order is the undo order; the whole log lives on the habit row.
    check_ins: List[datetime] = Field(
        default_factory=list,
        sa_column=Column(MutableList.as_mutable(CheckInLog), nullable=False, default=list),
    )

    @property
    def completion_count(self) -> int:
        return len(self.check_ins)

    @property
    def display_streak(self) -> str:
        return f"{self.streak}🔥"

    def copy_record(self) -> "Habit":
        """Return a detached copy carrying the same id and field values."""

        return Habit(
            id=self.id,
            title=self.title,
            created_at=self.created_at,
            goal_type=self.goal_type,
            target_count=self.target_count,
            due_date=self.due_date,
            last_completed_at=self.last_completed_at,
            streak=self.streak,
            check_ins=list(self.check_ins),
        )
