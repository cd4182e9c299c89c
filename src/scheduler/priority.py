"""Priority scoring that ranks catalog items for the next practice queue."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from src.scheduler.models import Progress, VocabularyItem
from src.scheduler.srs import DAY, MAX_EASINESS_FACTOR, MIN_EASINESS_FACTOR


NEW_ITEM_MULTIPLIER = 10
NEW_ITEM_SEEN_LIMIT = 3
RECENCY_WINDOW = timedelta(minutes=30)


@dataclass(frozen=True, slots=True)
class PriorityWeights:
    """Tunable weights of the priority formula.

    ``recency`` is negative so that items answered moments ago sink to the
    bottom of the queue.
    """

    overdue: float = 10.0
    accuracy: float = 5.0
    difficulty: float = 3.0
    recency: float = -8.0
    new_word: float = 7.0
    recency_window: timedelta = RECENCY_WINDOW


DEFAULT_WEIGHTS = PriorityWeights()


def score_item(
    item: VocabularyItem,
    progress: Optional[Progress],
    now: datetime,
    weights: PriorityWeights = DEFAULT_WEIGHTS,
) -> float:
    """Return the urgency of ``item``; higher means show it sooner.

    Never-seen items get a flat score above anything an item with history can
    normally reach. The result is not clamped and may be negative.
    """
    if progress is None:
        return weights.new_word * NEW_ITEM_MULTIPLIER

    score = 0.0

    overdue_days = max(0.0, (now - progress.next_due) / DAY)
    score += weights.overdue * overdue_days

    score += weights.accuracy * (1 - progress.accuracy)

    difficulty = (MAX_EASINESS_FACTOR - progress.easiness_factor) / (
        MAX_EASINESS_FACTOR - MIN_EASINESS_FACTOR
    )
    score += weights.difficulty * difficulty

    elapsed = now - progress.last_practiced_at
    if weights.recency_window > timedelta(0) and elapsed < weights.recency_window:
        score += weights.recency * (1 - elapsed / weights.recency_window)

    if item.is_new and progress.times_seen < NEW_ITEM_SEEN_LIMIT:
        score += weights.new_word

    return score
