from __future__ import annotations

import asyncio
import random
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

import pytest

from src.db.history import SqlPracticeHistoryStore
from src.db.progress import SqlProgressStore
from src.db.stats import SqlPracticeTotalsStore
from src.practice.session import PracticeService
from src.scheduler.models import Progress, VocabularyItem


NOW = datetime(2026, 10, 1, 8, 0, tzinfo=timezone.utc)
RUMAH = VocabularyItem(key="rumah", translations=("house", "home"))
BUKU = VocabularyItem(key="buku", translations=("book",))
KUCING = VocabularyItem(key="kucing", translations=("cat",))


class _StubStore:
    def __init__(self, records: Optional[List[Progress]] = None) -> None:
        self._records: Dict[str, Progress] = {record.key: record for record in records or []}
        self.put_calls = 0
        self.fail_puts = False

    async def get(self, key: str) -> Optional[Progress]:
        return self._records.get(key)

    async def get_all(self) -> List[Progress]:
        return list(self._records.values())

    async def put(self, progress: Progress) -> None:
        if self.fail_puts:
            raise OSError("disk full")
        self.put_calls += 1
        self._records[progress.key] = progress


class _StubTotals:
    def __init__(self) -> None:
        self.answers: List[bool] = []

    async def record_answer(self, is_correct: bool, now: Optional[datetime] = None) -> None:
        self.answers.append(is_correct)


class _StubHistory:
    def __init__(self) -> None:
        self.entries: List[tuple] = []

    async def add(self, item: VocabularyItem, is_correct: bool, now: Optional[datetime] = None) -> None:
        self.entries.append((item.key, is_correct, now))


def _mastered(key: str) -> Progress:
    return Progress(
        key=key,
        last_practiced_at=NOW - timedelta(days=2),
        next_due=NOW - timedelta(days=1),
        times_seen=5,
        times_correct=5,
        consecutive_correct_streak=5,
        is_mastered=True,
        mastered_at=NOW - timedelta(days=2),
    )


async def _answer_many(service: PracticeService, item: VocabularyItem, outcomes: List[bool]):
    results = []
    for index, is_correct in enumerate(outcomes):
        results.append(
            await service.record_answer(item, is_correct, now=NOW + timedelta(minutes=index))
        )
    return results


def test_record_answer_persists_and_signals_mastery_once() -> None:
    store = _StubStore()
    totals = _StubTotals()
    service = PracticeService(store, [RUMAH], totals=totals)

    results = asyncio.run(_answer_many(service, RUMAH, [True] * 7))

    assert [result.just_mastered for result in results] == [False] * 4 + [True, False, False]
    assert store.put_calls == 7
    assert totals.answers == [True] * 7
    assert service.get_progress("rumah").consecutive_correct_streak == 7
    assert results[4].progress.mastered_at == NOW + timedelta(minutes=4)
    assert results[6].progress.mastered_at == NOW + timedelta(minutes=4)


def test_record_answer_reports_quality_and_interval() -> None:
    service = PracticeService(_StubStore(), [RUMAH])

    first = asyncio.run(service.record_answer(RUMAH, True, response_time_ms=1500, now=NOW))
    second = asyncio.run(service.record_answer(RUMAH, False, user_answer="rumput", now=NOW))

    assert (first.quality, first.interval_days) == (5, 1)
    assert (second.quality, second.interval_days) == (2, 1)
    assert second.progress.confused_with == {"rumput": 1}


def test_failed_persist_leaves_progress_map_untouched() -> None:
    store = _StubStore()
    service = PracticeService(store, [RUMAH])
    asyncio.run(service.record_answer(RUMAH, True, now=NOW))
    before = service.get_progress("rumah")
    store.fail_puts = True

    with pytest.raises(OSError):
        asyncio.run(service.record_answer(RUMAH, False, now=NOW + timedelta(minutes=1)))

    assert service.get_progress("rumah") is before


def test_record_answer_appends_history_after_persisting() -> None:
    store = _StubStore()
    history = _StubHistory()
    service = PracticeService(store, [RUMAH, BUKU], history=history)

    asyncio.run(service.record_answer(RUMAH, True, now=NOW))
    asyncio.run(service.record_answer(BUKU, False, now=NOW + timedelta(minutes=1)))
    store.fail_puts = True
    with pytest.raises(OSError):
        asyncio.run(service.record_answer(RUMAH, False, now=NOW + timedelta(minutes=2)))

    assert history.entries == [
        ("rumah", True, NOW),
        ("buku", False, NOW + timedelta(minutes=1)),
    ]


def test_load_populates_progress_map() -> None:
    service = PracticeService(_StubStore([_mastered("rumah")]), [RUMAH, BUKU])

    asyncio.run(service.load())

    assert set(service.progress_map) == {"rumah"}
    assert service.statistics(NOW).mastered == 1


def test_next_queue_skips_mastered_items() -> None:
    service = PracticeService(_StubStore([_mastered("rumah")]), [RUMAH, BUKU, KUCING])
    asyncio.run(service.load())

    queue = service.next_queue(10, now=NOW)

    assert [item.key for item in queue] == ["buku", "kucing"]


def test_next_queue_retries_without_exclusions_when_empty() -> None:
    service = PracticeService(_StubStore(), [BUKU, KUCING])

    queue = service.next_queue(5, {"buku", "kucing"}, now=NOW)

    assert [item.key for item in queue] == ["buku", "kucing"]


def test_next_queue_is_empty_when_everything_is_mastered() -> None:
    service = PracticeService(_StubStore([_mastered("rumah")]), [RUMAH])
    asyncio.run(service.load())

    assert service.next_queue(5, {"rumah"}, now=NOW) == []


def test_default_queue_size_comes_from_configuration() -> None:
    service = PracticeService(_StubStore(), [RUMAH, BUKU, KUCING], queue_size=2)

    assert len(service.next_queue(now=NOW)) == 2


def test_seeded_jitter_is_reproducible() -> None:
    catalog = [VocabularyItem(key=f"kata-{index}") for index in range(6)]
    first = PracticeService(_StubStore(), catalog, jitter=0.1, rng=random.Random(3))
    second = PracticeService(_StubStore(), catalog, jitter=0.1, rng=random.Random(3))

    assert first.next_queue(6, now=NOW) == second.next_queue(6, now=NOW)


def test_due_queue_and_mistake_pool() -> None:
    service = PracticeService(_StubStore(), [RUMAH, BUKU, KUCING])

    async def scenario() -> None:
        await service.record_answer(BUKU, False, now=NOW)
        await service.record_answer(KUCING, True, now=NOW)

    asyncio.run(scenario())

    later = NOW + timedelta(days=1, minutes=1)
    assert [item.key for item in service.due_queue(10, now=later)] == ["rumah", "buku", "kucing"]
    assert [item.key for item in service.due_queue(10, now=NOW + timedelta(hours=1))] == ["rumah"]
    assert [item.key for item in service.mistake_pool()] == ["buku"]


@pytest.mark.asyncio
async def test_service_round_trips_through_database(session_factory) -> None:
    totals = SqlPracticeTotalsStore(session_factory)
    service = PracticeService(SqlProgressStore(session_factory), [RUMAH, BUKU], totals=totals)

    await _answer_many(service, RUMAH, [True, True, True, False])

    reloaded = PracticeService(SqlProgressStore(session_factory), [RUMAH, BUKU])
    await reloaded.load()
    progress = reloaded.get_progress("rumah")

    assert progress.times_seen == 4
    assert progress.times_correct == 3
    assert progress.consecutive_correct_streak == 0
    assert progress.recent_incorrect_streak == 1
    assert progress.is_mastered is False
    assert (await totals.snapshot()).total_seen == 4


@pytest.mark.asyncio
async def test_service_logs_answers_to_history_table(session_factory) -> None:
    history = SqlPracticeHistoryStore(session_factory)
    service = PracticeService(SqlProgressStore(session_factory), [RUMAH, BUKU], history=history)

    await _answer_many(service, RUMAH, [True, False])
    await service.record_answer(BUKU, True, now=NOW + timedelta(minutes=5))

    entries = await history.recent()
    assert [(entry.word, entry.is_correct) for entry in entries] == [
        ("buku", True),
        ("rumah", False),
        ("rumah", True),
    ]
    assert entries[-1].translations == ("house", "home")
