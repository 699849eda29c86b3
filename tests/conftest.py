"""Pytest configuration and shared fixtures for HabitStreak tests.

Provides an isolated SQLite database per test, a pinned clock and factories
for habits, so engine and repository tests never touch the real data
directory.
"""

from __future__ import annotations

import tempfile
from contextlib import contextmanager
from datetime import datetime, timedelta
from pathlib import Path
from zoneinfo import ZoneInfo

import pytest
from sqlmodel import Session, SQLModel, create_engine

from habitstreak.clock import FixedClock
from habitstreak.infra.repositories import SQLModelHabitRepository, SQLModelSettingsRepository
from habitstreak.models import GoalType, Habit
from habitstreak.services.tracker import HabitTracker

# Monday morning; far enough from midnight that hour offsets stay on the same day
START = datetime(2025, 1, 6, 9, 0)
NEW_YORK = ZoneInfo("America/New_York")
# Same wall time with a zone, for the HABITSTREAK_TIMEZONE convention
AWARE_START = START.replace(tzinfo=NEW_YORK)


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="function")
def db_engine():
    """Create an isolated SQLite database file for each test."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    engine = create_engine(f"sqlite:///{db_path}", echo=False)
    SQLModel.metadata.create_all(engine)

    yield engine

    engine.dispose()
    db_path.unlink(missing_ok=True)


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Session factory matching ``infra.database.create_session_factory``."""

    @contextmanager
    def factory():
        session = Session(db_engine, expire_on_commit=False)
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    return factory


@pytest.fixture
def habit_repo(session_factory) -> SQLModelHabitRepository:
    return SQLModelHabitRepository(session_factory)


@pytest.fixture
def settings_repo(session_factory) -> SQLModelSettingsRepository:
    return SQLModelSettingsRepository(session_factory)


# =============================================================================
# Clock and Habit Factories
# =============================================================================


@pytest.fixture
def clock() -> FixedClock:
    """A clock pinned to ``START`` that tests can move forward."""
    return FixedClock(START)


@pytest.fixture(params=["naive", "aware"])
def zoned_clock(request) -> FixedClock:
    """A pinned clock under each timestamp convention."""
    if request.param == "aware":
        return FixedClock(AWARE_START, NEW_YORK)
    return FixedClock(START)


@pytest.fixture
def tracker(habit_repo, clock) -> HabitTracker:
    return HabitTracker(habit_repo, clock=clock)


@pytest.fixture
def habit_factory():
    """Factory for in-memory habits with sensible defaults.

    Returns:
        Callable: Function that builds Habit instances
    """

    def _create_habit(
        title: str = "Read",
        goal_type: GoalType = GoalType.DATE,
        target_count: int | None = None,
        due_date: datetime | None = None,
        created_at: datetime = START,
        streak: int = 0,
        check_ins: list[datetime] | None = None,
        last_completed_at: datetime | None = None,
    ) -> Habit:
        if goal_type == GoalType.COUNT and target_count is None:
            target_count = 10
        if goal_type == GoalType.DATE and due_date is None:
            due_date = created_at + timedelta(days=30)
        return Habit(
            title=title,
            goal_type=goal_type,
            target_count=target_count,
            due_date=due_date,
            created_at=created_at,
            streak=streak,
            check_ins=list(check_ins or []),
            last_completed_at=last_completed_at,
        )

    return _create_habit
