"""Practice session service: records answers and refills review queues."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import AbstractSet, Callable, Dict, List, Optional, Protocol, Sequence

from src.db.progress import ProgressStore
from src.scheduler.answers import apply_answer
from src.scheduler.mastery import MASTERY_STREAK, just_mastered
from src.scheduler.models import Progress, VocabularyItem
from src.scheduler.priority import DEFAULT_WEIGHTS, PriorityWeights
from src.scheduler.selection import (
    DEFAULT_MISTAKE_POOL_SIZE,
    DEFAULT_QUEUE_SIZE,
    filter_unmastered,
    get_due_items,
    get_mistake_pool,
    select_next_items,
)
from src.scheduler.srs import calculate_quality, previous_interval_days
from src.scheduler.stats import DueStatistics, get_due_statistics


LOGGER = logging.getLogger(__name__)


class TotalsRecorder(Protocol):
    async def record_answer(self, is_correct: bool, now: Optional[datetime] = None) -> None:
        ...


class HistoryRecorder(Protocol):
    async def add(self, item: VocabularyItem, is_correct: bool, now: Optional[datetime] = None) -> None:
        ...


@dataclass(slots=True)
class AnswerOutcome:
    """Result of recording a single answer."""

    progress: Progress
    quality: int
    interval_days: int
    just_mastered: bool


class PracticeService:
    """Coordinates the progress store with the pure scheduling functions.

    Answers for the same item must not be recorded concurrently; the store
    offers no optimistic locking and the last write wins.
    """

    def __init__(
        self,
        store: ProgressStore,
        catalog: Sequence[VocabularyItem],
        *,
        weights: PriorityWeights = DEFAULT_WEIGHTS,
        mastery_threshold: int = MASTERY_STREAK,
        queue_size: int = DEFAULT_QUEUE_SIZE,
        jitter: float = 0.0,
        min_score: Optional[float] = None,
        rng: Optional[random.Random] = None,
        totals: Optional[TotalsRecorder] = None,
        history: Optional[HistoryRecorder] = None,
    ) -> None:
        self._store = store
        self._catalog = list(catalog)
        self._weights = weights
        self._mastery_threshold = mastery_threshold
        self._queue_size = queue_size
        self._jitter = jitter
        self._min_score = min_score
        self._rng = rng if rng is not None else random.Random()
        self._totals = totals
        self._history = history
        self._progress: Dict[str, Progress] = {}

    @property
    def catalog(self) -> List[VocabularyItem]:
        return list(self._catalog)

    @property
    def progress_map(self) -> Dict[str, Progress]:
        return dict(self._progress)

    def get_progress(self, key: str) -> Optional[Progress]:
        return self._progress.get(key)

    async def load(self) -> None:
        """Replace the in-memory progress map with the store's contents."""
        records = await self._store.get_all()
        self._progress = {record.key: record for record in records}
        LOGGER.debug("Loaded %d progress records.", len(self._progress))

    async def record_answer(
        self,
        item: VocabularyItem,
        is_correct: bool,
        *,
        user_answer: Optional[str] = None,
        response_time_ms: Optional[float] = None,
        now: Optional[datetime] = None,
    ) -> AnswerOutcome:
        """Apply an answer, persist it, then update the in-memory map."""
        if now is None:
            now = datetime.now(timezone.utc)

        previous = await self._store.get(item.key)
        updated = apply_answer(
            item,
            previous,
            is_correct,
            user_answer=user_answer,
            response_time_ms=response_time_ms,
            now=now,
            mastery_threshold=self._mastery_threshold,
        )
        await self._store.put(updated)
        self._progress[item.key] = updated

        if self._totals is not None:
            await self._totals.record_answer(is_correct, now)
        if self._history is not None:
            await self._history.add(item, is_correct, now)

        mastered_now = just_mastered(previous, updated)
        interval_days = previous_interval_days(updated.last_practiced_at, updated.next_due)
        LOGGER.debug(
            "Recorded %s answer for %r: streak=%d, next due in %d day(s).",
            "correct" if is_correct else "incorrect",
            item.key,
            updated.consecutive_correct_streak,
            interval_days,
        )
        if mastered_now:
            LOGGER.info("Item %r mastered after %d answers.", item.key, updated.times_seen)

        return AnswerOutcome(
            progress=updated,
            quality=calculate_quality(is_correct, response_time_ms),
            interval_days=interval_days,
            just_mastered=mastered_now,
        )

    def next_queue(
        self,
        count: Optional[int] = None,
        exclude: AbstractSet[str] = frozenset(),
        *,
        now: Optional[datetime] = None,
    ) -> List[VocabularyItem]:
        """Return the next unmastered items to practice, highest priority first.

        When the exclusion set removes everything, selection is retried once
        without it. An empty result means nothing is left to practice.
        """
        candidates = filter_unmastered(self._catalog, self._progress)
        return self._select_with_retry(
            lambda excluded: select_next_items(
                candidates,
                self._progress,
                self._resolve_count(count),
                excluded,
                now=now,
                **self._selection_options(),
            ),
            exclude,
        )

    def due_queue(
        self,
        count: Optional[int] = None,
        exclude: AbstractSet[str] = frozenset(),
        *,
        now: Optional[datetime] = None,
    ) -> List[VocabularyItem]:
        """Like :meth:`next_queue` but restricted to items that are due."""
        return self._select_with_retry(
            lambda excluded: get_due_items(
                self._catalog,
                self._progress,
                self._resolve_count(count),
                excluded,
                now=now,
                **self._selection_options(),
            ),
            exclude,
        )

    def mistake_pool(self, limit: int = DEFAULT_MISTAKE_POOL_SIZE) -> List[VocabularyItem]:
        return get_mistake_pool(self._catalog, self._progress, limit)

    def statistics(self, now: Optional[datetime] = None) -> DueStatistics:
        return get_due_statistics(self._catalog, self._progress, now)

    def _resolve_count(self, count: Optional[int]) -> int:
        return self._queue_size if count is None else count

    def _selection_options(self) -> dict:
        return {
            "weights": self._weights,
            "jitter": self._jitter,
            "rng": self._rng,
            "min_score": self._min_score,
        }

    @staticmethod
    def _select_with_retry(
        select: Callable[[AbstractSet[str]], List[VocabularyItem]],
        exclude: AbstractSet[str],
    ) -> List[VocabularyItem]:
        selected = select(exclude)
        if selected or not exclude:
            return selected
        LOGGER.debug("Exclusion set emptied the queue; retrying without %d excluded keys.", len(exclude))
        return select(frozenset())
