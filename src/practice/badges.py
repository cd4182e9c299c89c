"""Presentation helpers that turn progress records into UI badges."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from src.scheduler.answers import STRUGGLING_LEVEL
from src.scheduler.mastery import MASTERY_STREAK
from src.scheduler.models import Progress


_STREAK_STYLES = (
    ("⭕", "neutral"),
    ("✨", "started"),
    ("⭐", "building"),
    ("🔥", "hot"),
    ("🎯", "almost"),
)
_MASTERED_STYLE = ("🏆", "mastered")


@dataclass(frozen=True, slots=True)
class StreakBadge:
    emoji: str
    tone: str
    label: str


def streak_badge(progress: Optional[Progress], threshold: int = MASTERY_STREAK) -> StreakBadge:
    """Badge for the current streak, e.g. ``🔥 3/5``."""
    streak = progress.consecutive_correct_streak if progress is not None else 0
    if streak >= threshold:
        emoji, tone = _MASTERED_STYLE
    else:
        emoji, tone = _STREAK_STYLES[min(streak, len(_STREAK_STYLES) - 1)]
    return StreakBadge(emoji=emoji, tone=tone, label=f"{min(streak, threshold)}/{threshold}")


def needs_practice(progress: Optional[Progress]) -> bool:
    """Whether the item should carry the "needs practice" flag."""
    return progress is not None and progress.easing_level == STRUGGLING_LEVEL
