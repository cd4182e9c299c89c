"""Consecutive-correct streak tracking and the permanent mastery milestone."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from src.scheduler.models import Progress


MASTERY_STREAK = 5


class MasteryState(str, Enum):
    UNSEEN = "unseen"
    PRACTICING = "practicing"
    MASTERED = "mastered"


@dataclass(frozen=True, slots=True)
class StreakUpdate:
    """Streak and mastery fields after one answer."""

    consecutive_correct_streak: int
    is_mastered: bool
    mastered_at: Optional[datetime]


def mastery_state(progress: Optional[Progress]) -> MasteryState:
    if progress is None:
        return MasteryState.UNSEEN
    if progress.is_mastered:
        return MasteryState.MASTERED
    return MasteryState.PRACTICING


def advance_streak(
    progress: Progress,
    is_correct: bool,
    now: datetime,
    threshold: int = MASTERY_STREAK,
) -> StreakUpdate:
    """Advance the streak for one answer.

    Mastery is granted the moment the streak first reaches ``threshold`` and
    is never revoked; incorrect answers only reset the streak.
    """
    if not is_correct:
        return StreakUpdate(0, progress.is_mastered, progress.mastered_at)

    streak = progress.consecutive_correct_streak + 1
    if progress.is_mastered:
        return StreakUpdate(streak, True, progress.mastered_at)
    if streak >= threshold:
        return StreakUpdate(streak, True, now)
    return StreakUpdate(streak, False, None)


def just_mastered(before: Optional[Progress], after: Progress) -> bool:
    """True only for the answer that turned the item mastered."""
    was_mastered = before is not None and before.is_mastered
    return after.is_mastered and not was_mastered
