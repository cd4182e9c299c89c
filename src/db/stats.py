from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from . import PracticeTotals


OVERALL_TOTALS_ID = "overall"


@dataclass(slots=True)
class PracticeTotalsSnapshot:
    """Aggregated answer counters across every practiced item."""

    total_seen: int
    total_correct: int
    last_practiced_at: Optional[datetime]

    @property
    def accuracy(self) -> float:
        if self.total_seen == 0:
            return 0.0
        return self.total_correct / self.total_seen


async def ensure_practice_totals(session: AsyncSession) -> PracticeTotals:
    """Return the totals row, creating an empty one when missing."""
    totals = await session.get(PracticeTotals, OVERALL_TOTALS_ID)
    if totals is None:
        totals = PracticeTotals(id=OVERALL_TOTALS_ID, total_seen=0, total_correct=0)
        session.add(totals)
        await session.flush()
    return totals


async def increment_practice_totals(
    session: AsyncSession,
    *,
    seen: int = 0,
    correct: int = 0,
    now: Optional[datetime] = None,
) -> None:
    """Increment the overall counters and stamp the practice time."""
    if not seen and not correct:
        return
    if now is None:
        now = datetime.now(timezone.utc)

    await ensure_practice_totals(session)

    stmt = (
        update(PracticeTotals)
        .where(PracticeTotals.id == OVERALL_TOTALS_ID)
        .values(
            total_seen=PracticeTotals.total_seen + seen,
            total_correct=PracticeTotals.total_correct + correct,
            last_practiced_at=now.astimezone(timezone.utc),
        )
        .execution_options(synchronize_session=False)
    )
    await session.execute(stmt)


async def get_practice_totals(session: AsyncSession) -> PracticeTotalsSnapshot:
    """Return the overall counters, zeroed when nothing was practiced yet."""
    totals = await session.get(PracticeTotals, OVERALL_TOTALS_ID)
    if totals is None:
        return PracticeTotalsSnapshot(total_seen=0, total_correct=0, last_practiced_at=None)
    await session.refresh(totals)
    last_practiced_at = totals.last_practiced_at
    if last_practiced_at is not None and last_practiced_at.tzinfo is None:
        last_practiced_at = last_practiced_at.replace(tzinfo=timezone.utc)
    return PracticeTotalsSnapshot(
        total_seen=totals.total_seen,
        total_correct=totals.total_correct,
        last_practiced_at=last_practiced_at,
    )


class SqlPracticeTotalsStore:
    """Session-managing wrapper around the overall practice counters."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def record_answer(self, is_correct: bool, now: Optional[datetime] = None) -> None:
        async with self._session_factory() as session:
            async with session.begin():
                await increment_practice_totals(
                    session, seen=1, correct=1 if is_correct else 0, now=now
                )

    async def snapshot(self) -> PracticeTotalsSnapshot:
        async with self._session_factory() as session:
            return await get_practice_totals(session)
