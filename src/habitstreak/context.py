"""Application context for dependency injection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .clock import Clock, SystemClock
from .config import BaseConfig
from .infra.database import SessionFactory, bootstrap_database
from .infra.repositories import SQLModelHabitRepository, SQLModelSettingsRepository
from .scheduler import ReminderScheduler
from .services.tracker import HabitTracker


@dataclass
class AppContext:
    """Centralized application context with services and state."""

    config: BaseConfig
    session_factory: SessionFactory
    clock: Clock

    habit_repo: SQLModelHabitRepository
    settings_repo: SQLModelSettingsRepository

    tracker: HabitTracker
    reminders: ReminderScheduler


def create_app_context(
    config: Optional[BaseConfig] = None, *, clock: Optional[Clock] = None
) -> AppContext:
    """Create and initialize the application context."""

    if config is None:
        config = BaseConfig()

    _, session_factory = bootstrap_database(config)

    if clock is None:
        clock = SystemClock.from_name(config.TIMEZONE)

    habit_repo = SQLModelHabitRepository(session_factory)
    settings_repo = SQLModelSettingsRepository(session_factory)

    return AppContext(
        config=config,
        session_factory=session_factory,
        clock=clock,
        habit_repo=habit_repo,
        settings_repo=settings_repo,
        tracker=HabitTracker(habit_repo, clock=clock),
        reminders=ReminderScheduler(settings_repo, timezone=getattr(clock, "tz", None)),
    )


__all__ = ["AppContext", "create_app_context"]
