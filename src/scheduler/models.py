"""Value types shared by the review scheduler."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Optional, Tuple


DEFAULT_EASINESS_FACTOR = 2.5
DEFAULT_EASING_LEVEL = 1


@dataclass(frozen=True, slots=True)
class VocabularyItem:
    """A catalog entry the learner practices. Read-only to the scheduler."""

    key: str
    translations: Tuple[str, ...] = ()
    is_new: bool = False
    audio_url: Optional[str] = None
    phonetic: Optional[str] = None
    example: Optional[str] = None


@dataclass(slots=True)
class Progress:
    """Practice history for a single vocabulary item.

    A record exists only once the item has been answered at least once, so
    ``last_practiced_at`` and ``next_due`` are always populated.
    """

    key: str
    last_practiced_at: datetime
    next_due: datetime
    times_seen: int = 0
    times_correct: int = 0
    easiness_factor: float = DEFAULT_EASINESS_FACTOR
    consecutive_correct_streak: int = 0
    is_mastered: bool = False
    mastered_at: Optional[datetime] = None
    recent_incorrect_streak: int = 0
    confused_with: Dict[str, int] = field(default_factory=dict)
    easing_level: int = DEFAULT_EASING_LEVEL

    @property
    def times_incorrect(self) -> int:
        return self.times_seen - self.times_correct

    @property
    def accuracy(self) -> float:
        """Share of correct answers, 0 when the item was never seen."""
        if self.times_seen == 0:
            return 0.0
        return self.times_correct / self.times_seen


def default_progress(key: str, now: datetime) -> Progress:
    """Return the blank record used before an item's first answer is applied."""
    return Progress(key=key, last_practiced_at=now, next_due=now)
