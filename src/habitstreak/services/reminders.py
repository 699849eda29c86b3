"""Daily reminder preferences: validation and persistence."""

from __future__ import annotations

from dataclasses import dataclass

from ..domain.repositories import SettingsRepository
from ..errors import ValidationError

ENABLED_KEY = "reminder_enabled"
HOUR_KEY = "reminder_hour"
MINUTE_KEY = "reminder_minute"

DEFAULT_HOUR = 20
DEFAULT_MINUTE = 0

MOTIVATION_MESSAGES = (
    "The moment you start is the best moment ✨",
    "Don't forget to check in for yourself today 🌟",
    "Small daily efforts add up 🌱",
    "You are building something that is yours 🔥",
    "You are closer to your goal than yesterday 🏆",
)


@dataclass(frozen=True)
class ReminderSettings:
    enabled: bool = False
    hour: int = DEFAULT_HOUR
    minute: int = DEFAULT_MINUTE

    def __post_init__(self) -> None:
        validate_reminder_time(self.hour, self.minute)

    @property
    def time_label(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}"


def validate_reminder_time(hour: int, minute: int) -> None:
    """Raise ``ValidationError`` unless hour/minute name a clock time."""

    for name, value, upper in (("hour", hour, 24), ("minute", minute, 60)):
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValidationError(f"Reminder {name} must be an integer")
        if not 0 <= value < upper:
            raise ValidationError(f"Reminder {name} must be between 0 and {upper - 1}")


def _as_int(raw: str | None, default: int) -> int:
    try:
        return int(raw) if raw is not None else default
    except ValueError:
        return default


def load_reminder_settings(repo: SettingsRepository) -> ReminderSettings:
    """Read stored preferences, falling back to defaults for missing keys."""

    enabled = repo.get(ENABLED_KEY)
    hour = repo.get(HOUR_KEY)
    minute = repo.get(MINUTE_KEY)
    try:
        return ReminderSettings(
            enabled=bool(enabled) and enabled.value.lower() in ("true", "1", "yes"),
            hour=_as_int(hour.value if hour else None, DEFAULT_HOUR),
            minute=_as_int(minute.value if minute else None, DEFAULT_MINUTE),
        )
    except ValidationError:
        # Stored values were edited out of band; start over from defaults.
        return ReminderSettings()


def save_reminder_settings(repo: SettingsRepository, settings: ReminderSettings) -> None:
    repo.set(ENABLED_KEY, "true" if settings.enabled else "false", "Daily reminder on/off")
    repo.set(HOUR_KEY, str(settings.hour), "Daily reminder hour (0-23)")
    repo.set(MINUTE_KEY, str(settings.minute), "Daily reminder minute (0-59)")


__all__ = [
    "MOTIVATION_MESSAGES",
    "ReminderSettings",
    "load_reminder_settings",
    "save_reminder_settings",
    "validate_reminder_time",
]
