"""Background scheduler for the daily habit reminder."""

from __future__ import annotations

import random
from datetime import tzinfo
from typing import Callable, Optional

from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

from .domain.repositories import SettingsRepository
from .logging_config import get_logger
from .services.reminders import (
    MOTIVATION_MESSAGES,
    ReminderSettings,
    load_reminder_settings,
    save_reminder_settings,
)

logger = get_logger("scheduler")

REMINDER_JOB_ID = "habit_daily_reminder"

Notifier = Callable[[str], None]


def log_notification(message: str) -> None:
    """Default delivery: write the reminder to the application log."""
    logger.info("Reminder: %s", message, extra={"channel": "log"})


class ReminderScheduler:
    """Keeps one daily cron job in step with the stored reminder settings.

    The job has no dependency on habit data; it only needs the time of day.
    Delivery goes through ``notify`` so callers can plug in their own
    channel.
    """

    def __init__(
        self,
        settings_repo: SettingsRepository,
        *,
        notify: Optional[Notifier] = None,
        scheduler: Optional[BackgroundScheduler] = None,
        timezone: Optional[tzinfo] = None,
        rng: Optional[random.Random] = None,
    ):
        self.settings_repo = settings_repo
        self.notify = notify or log_notification
        if scheduler is None:
            scheduler = BackgroundScheduler(timezone=timezone) if timezone else BackgroundScheduler()
        self.scheduler = scheduler
        self.rng = rng or random.Random()

    @property
    def running(self) -> bool:
        return bool(self.scheduler.running)

    def start(self) -> ReminderSettings:
        """Start the scheduler and restore the stored reminder."""
        settings = load_reminder_settings(self.settings_repo)
        self._apply(settings, announce=False)
        if not self.scheduler.running:
            self.scheduler.start()
            logger.info("Reminder scheduler started", extra={"reminder": settings.time_label})
        return settings

    def stop(self) -> None:
        """Stop the scheduler without waiting for a running job to finish."""
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
            logger.info("Reminder scheduler stopped")

    def current(self) -> ReminderSettings:
        return load_reminder_settings(self.settings_repo)

    def update(self, enabled: bool, hour: int, minute: int) -> ReminderSettings:
        """Store new preferences and reschedule.

        Any pending reminder is dropped first. When enabled, one
        motivation message is delivered right away and a daily job is
        scheduled at ``hour:minute``.
        """
        settings = ReminderSettings(enabled=bool(enabled), hour=hour, minute=minute)
        save_reminder_settings(self.settings_repo, settings)
        self._apply(settings, announce=True)
        return settings

    def send_motivation(self) -> str:
        message = self.rng.choice(MOTIVATION_MESSAGES)
        self.notify(message)
        return message

    def _apply(self, settings: ReminderSettings, *, announce: bool) -> None:
        self._remove_job()
        if not settings.enabled:
            logger.info("Daily reminder disabled")
            return

        if announce:
            self.send_motivation()
        self.scheduler.add_job(
            func=self.send_motivation,
            trigger=CronTrigger(
                hour=settings.hour,
                minute=settings.minute,
                timezone=self.scheduler.timezone,
            ),
            id=REMINDER_JOB_ID,
            name="Daily habit reminder",
            replace_existing=True,
        )
        logger.info("Scheduled daily reminder", extra={"reminder": settings.time_label})

    def _remove_job(self) -> None:
        try:
            self.scheduler.remove_job(REMINDER_JOB_ID)
        except JobLookupError:
            return


__all__ = ["REMINDER_JOB_ID", "ReminderScheduler", "log_notification"]
