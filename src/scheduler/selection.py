"""Queue selection built on top of the priority scorer."""

from __future__ import annotations

import random
from datetime import datetime, timezone
from typing import AbstractSet, Iterable, List, Mapping, Optional, Tuple

from src.scheduler.models import Progress, VocabularyItem
from src.scheduler.priority import DEFAULT_WEIGHTS, PriorityWeights, score_item
from src.scheduler.stats import is_due


DEFAULT_QUEUE_SIZE = 50
DEFAULT_MISTAKE_POOL_SIZE = 20


def select_next_items(
    catalog: Iterable[VocabularyItem],
    progress_map: Mapping[str, Progress],
    count: int = DEFAULT_QUEUE_SIZE,
    exclude: AbstractSet[str] = frozenset(),
    *,
    now: Optional[datetime] = None,
    weights: PriorityWeights = DEFAULT_WEIGHTS,
    jitter: float = 0.0,
    rng: Optional[random.Random] = None,
    min_score: Optional[float] = None,
) -> List[VocabularyItem]:
    """Return up to ``count`` items ordered from most to least urgent.

    Items whose key is in ``exclude`` are skipped. With ``jitter`` above zero
    every score is scaled by a random factor in ``[1 - jitter, 1 + jitter]``
    drawn from ``rng``. When ``min_score`` is given, items scoring at or below
    it are dropped. Ties keep catalog order. Mastered items are not treated
    specially; callers filter them beforehand.
    """
    if count <= 0:
        return []
    if now is None:
        now = datetime.now(timezone.utc)
    if jitter and rng is None:
        rng = random.Random()

    scored: List[Tuple[float, VocabularyItem]] = []
    for item in catalog:
        if item.key in exclude:
            continue
        score = score_item(item, progress_map.get(item.key), now, weights)
        if min_score is not None and score <= min_score:
            continue
        if jitter:
            score *= 1 + rng.uniform(-jitter, jitter)
        scored.append((score, item))

    scored.sort(key=lambda entry: entry[0], reverse=True)
    return [item for _, item in scored[:count]]


def filter_unmastered(
    catalog: Iterable[VocabularyItem], progress_map: Mapping[str, Progress]
) -> List[VocabularyItem]:
    """Drop items whose progress carries the mastery milestone."""
    unmastered = []
    for item in catalog:
        progress = progress_map.get(item.key)
        if progress is None or not progress.is_mastered:
            unmastered.append(item)
    return unmastered


def get_due_items(
    catalog: Iterable[VocabularyItem],
    progress_map: Mapping[str, Progress],
    count: int = DEFAULT_QUEUE_SIZE,
    exclude: AbstractSet[str] = frozenset(),
    *,
    now: Optional[datetime] = None,
    **selection_options,
) -> List[VocabularyItem]:
    """Rank the unmastered items that are due now, including unseen ones."""
    if now is None:
        now = datetime.now(timezone.utc)
    due = [
        item
        for item in filter_unmastered(catalog, progress_map)
        if is_due(progress_map.get(item.key), now)
    ]
    return select_next_items(due, progress_map, count, exclude, now=now, **selection_options)


def get_mistake_pool(
    catalog: Iterable[VocabularyItem],
    progress_map: Mapping[str, Progress],
    limit: int = DEFAULT_MISTAKE_POOL_SIZE,
) -> List[VocabularyItem]:
    """Return unmastered items answered wrong at least once, worst first."""
    entries = []
    for item in filter_unmastered(catalog, progress_map):
        progress = progress_map.get(item.key)
        if progress is None or progress.times_incorrect <= 0:
            continue
        entries.append((progress.times_incorrect, progress.recent_incorrect_streak, item))

    entries.sort(key=lambda entry: (entry[0], entry[1]), reverse=True)
    return [item for _, _, item in entries[: max(0, limit)]]
