"""Recent-answer log backed by SQLAlchemy."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.scheduler.models import VocabularyItem

from . import PracticeHistory


DEFAULT_HISTORY_LIMIT = 100


@dataclass(slots=True)
class PracticeHistoryItem:
    id: int
    word: str
    translations: Tuple[str, ...]
    is_correct: bool
    answered_at: datetime


def _to_item(row: PracticeHistory) -> PracticeHistoryItem:
    answered_at = row.answered_at
    if answered_at.tzinfo is None:
        answered_at = answered_at.replace(tzinfo=timezone.utc)
    return PracticeHistoryItem(
        id=row.id,
        word=row.word,
        translations=tuple(row.translations or ()),
        is_correct=row.is_correct,
        answered_at=answered_at,
    )


async def add_history_entry(
    session: AsyncSession,
    item: VocabularyItem,
    is_correct: bool,
    now: Optional[datetime] = None,
) -> PracticeHistory:
    """Append one answer to the log."""
    if now is None:
        now = datetime.now(timezone.utc)
    row = PracticeHistory(
        word=item.key,
        translations=list(item.translations),
        is_correct=is_correct,
        answered_at=now.astimezone(timezone.utc),
    )
    session.add(row)
    await session.flush()
    return row


async def list_history(session: AsyncSession, limit: int = DEFAULT_HISTORY_LIMIT) -> List[PracticeHistoryItem]:
    """Return up to ``limit`` entries, newest first."""
    if limit <= 0:
        return []
    stmt = (
        select(PracticeHistory)
        .order_by(PracticeHistory.answered_at.desc(), PracticeHistory.id.desc())
        .limit(limit)
    )
    rows = (await session.scalars(stmt)).all()
    return [_to_item(row) for row in rows]


async def clear_history(session: AsyncSession) -> None:
    await session.execute(delete(PracticeHistory))


class SqlPracticeHistoryStore:
    """Session-managing wrapper around the practice history table."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def add(self, item: VocabularyItem, is_correct: bool, now: Optional[datetime] = None) -> None:
        async with self._session_factory() as session:
            async with session.begin():
                await add_history_entry(session, item, is_correct, now)

    async def recent(self, limit: int = DEFAULT_HISTORY_LIMIT) -> List[PracticeHistoryItem]:
        async with self._session_factory() as session:
            return await list_history(session, limit)

    async def clear(self) -> None:
        async with self._session_factory() as session:
            async with session.begin():
                await clear_history(session)
