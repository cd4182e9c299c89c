"""Progress repository backed by SQLAlchemy."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional, Protocol

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.scheduler.models import Progress

from . import ItemProgress


class ProgressStore(Protocol):
    """Key-value repository of progress records keyed by item key."""

    async def get(self, key: str) -> Optional[Progress]:
        ...

    async def get_all(self) -> List[Progress]:
        ...

    async def put(self, progress: Progress) -> None:
        ...


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite hands back naive datetimes even for timezone-aware columns.
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _to_utc(value: Optional[datetime]) -> Optional[datetime]:
    # Offsets are dropped on write, so aware values are normalized to UTC first.
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc)
    return value


def row_to_progress(row: ItemProgress) -> Progress:
    """Convert a stored row into a detached progress value."""
    return Progress(
        key=row.key,
        last_practiced_at=_as_utc(row.last_practiced_at),
        next_due=_as_utc(row.next_due),
        times_seen=row.times_seen,
        times_correct=row.times_correct,
        easiness_factor=row.easiness_factor,
        consecutive_correct_streak=row.consecutive_correct_streak,
        is_mastered=row.is_mastered,
        mastered_at=_as_utc(row.mastered_at),
        recent_incorrect_streak=row.recent_incorrect_streak,
        confused_with=dict(row.confused_with or {}),
        easing_level=row.easing_level,
    )


def copy_progress_to_row(progress: Progress, row: ItemProgress) -> None:
    """Overwrite every tracked column of ``row`` with ``progress``."""
    row.times_seen = progress.times_seen
    row.times_correct = progress.times_correct
    row.last_practiced_at = _to_utc(progress.last_practiced_at)
    row.next_due = _to_utc(progress.next_due)
    row.easiness_factor = progress.easiness_factor
    row.consecutive_correct_streak = progress.consecutive_correct_streak
    row.is_mastered = progress.is_mastered
    row.mastered_at = _to_utc(progress.mastered_at)
    row.recent_incorrect_streak = progress.recent_incorrect_streak
    row.confused_with = dict(progress.confused_with)
    row.easing_level = progress.easing_level


async def get_item_progress(session: AsyncSession, key: str) -> Optional[ItemProgress]:
    return await session.get(ItemProgress, key)


async def upsert_item_progress(session: AsyncSession, progress: Progress) -> ItemProgress:
    """Insert or update the row for ``progress.key``."""
    row = await session.get(ItemProgress, progress.key)
    if row is None:
        row = ItemProgress(key=progress.key)
        copy_progress_to_row(progress, row)
        session.add(row)
    else:
        copy_progress_to_row(progress, row)
    await session.flush()
    return row


class SqlProgressStore:
    """``ProgressStore`` implementation that opens one transaction per call."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get(self, key: str) -> Optional[Progress]:
        async with self._session_factory() as session:
            row = await get_item_progress(session, key)
            return row_to_progress(row) if row is not None else None

    async def get_all(self) -> List[Progress]:
        async with self._session_factory() as session:
            result = await session.execute(select(ItemProgress).order_by(ItemProgress.key))
            return [row_to_progress(row) for row in result.scalars().all()]

    async def put(self, progress: Progress) -> None:
        async with self._session_factory() as session:
            async with session.begin():
                await upsert_item_progress(session, progress)

    async def clear(self) -> None:
        """Remove every progress record. Administrative reset only."""
        async with self._session_factory() as session:
            async with session.begin():
                await session.execute(delete(ItemProgress))
