"""Milestone badges fired on exact streak and completion counts."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..models.habit import Habit


class MilestoneKind(str, Enum):
    STREAK = "streak"
    COMPLETIONS = "completions"


@dataclass(frozen=True)
class Badge:
    """A celebratory marker for one milestone."""

    kind: MilestoneKind
    threshold: int
    title: str
    subtitle: str
    symbol: str

    @property
    def label(self) -> str:
        return f"{self.symbol}{self.threshold}"


STREAK_MILESTONES: dict[int, Badge] = {
    7: Badge(MilestoneKind.STREAK, 7, "One week!", "7 days in a row, amazing!", "🔥"),
    14: Badge(MilestoneKind.STREAK, 14, "Two weeks strong!", "14 days in a row, keep it up!", "🔥"),
    30: Badge(MilestoneKind.STREAK, 30, "A full month!", "30 days in a row, outstanding!", "🏆"),
    100: Badge(MilestoneKind.STREAK, 100, "100-day legend!", "100 days in a row, legendary!", "👑"),
}

COMPLETION_MILESTONES: dict[int, Badge] = {
    10: Badge(MilestoneKind.COMPLETIONS, 10, "10 completions!", "A strong start, keep going!", "⭐️"),
    50: Badge(MilestoneKind.COMPLETIONS, 50, "50 completions!", "Halfway to a hundred, well done!", "🎖️"),
    100: Badge(MilestoneKind.COMPLETIONS, 100, "100 completions!", "A hundred check-ins, superb!", "🏆"),
}


def check_milestone(habit: Habit) -> Optional[Badge]:
    """Return the badge for the habit's current counters, if any.

    Lookups are exact matches, so a counter that skips over a value never
    fires that badge. A streak badge wins over a completion badge reached
    on the same check-in.
    """

    badge = STREAK_MILESTONES.get(habit.streak)
    if badge is not None:
        return badge
    return COMPLETION_MILESTONES.get(habit.completion_count)


def earned_badges(habit: Habit) -> list[Badge]:
    """Every badge whose threshold has been reached, streak badges first."""

    shelf = [b for t, b in sorted(STREAK_MILESTONES.items()) if habit.streak >= t]
    shelf += [
        b for t, b in sorted(COMPLETION_MILESTONES.items()) if habit.completion_count >= t
    ]
    return shelf


def praise(streak: int) -> str:
    """Encouragement line shown after a check-in."""

    if streak <= 0:
        return "Every streak starts with a single day 🌱"
    if streak == 1:
        return "Great start! 🌟"
    if streak <= 3:
        return "Nice rhythm, keep it going! 💪"
    if streak <= 6:
        return "Getting steadier every day! ✨"
    if streak == 7:
        return "One full week! 🔥"
    if streak <= 13:
        return "Almost two weeks, keep pushing! 🚀"
    return f"Incredible! {streak} days in a row! 🏆"


__all__ = [
    "Badge",
    "COMPLETION_MILESTONES",
    "MilestoneKind",
    "STREAK_MILESTONES",
    "check_milestone",
    "earned_badges",
    "praise",
]
