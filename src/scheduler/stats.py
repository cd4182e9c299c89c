"""Due-date aggregation and formatting helpers for dashboards."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Iterable, Mapping, Optional

from src.scheduler.models import Progress, VocabularyItem
from src.scheduler.srs import DAY


HOUR = timedelta(hours=1)
MINUTE = timedelta(minutes=1)


@dataclass(frozen=True, slots=True)
class DueStatistics:
    """Counts describing how much of the catalog needs attention."""

    due_now: int
    due_soon: int
    new_words: int
    mastered: int
    total_words: int


def is_due(progress: Optional[Progress], now: Optional[datetime] = None) -> bool:
    """Unseen items are always due."""
    if progress is None:
        return True
    if now is None:
        now = datetime.now(timezone.utc)
    return progress.next_due <= now


def get_due_statistics(
    catalog: Iterable[VocabularyItem],
    progress_map: Mapping[str, Progress],
    now: Optional[datetime] = None,
) -> DueStatistics:
    """Aggregate the catalog into due/new/mastered counts.

    Items without progress count only as new words. ``due_soon`` covers
    ``now < next_due <= now + 24h``.
    """
    if now is None:
        now = datetime.now(timezone.utc)

    due_now = due_soon = new_words = mastered = total = 0
    for item in catalog:
        total += 1
        progress = progress_map.get(item.key)
        if progress is None:
            new_words += 1
            continue
        if progress.is_mastered:
            mastered += 1
        if progress.next_due <= now:
            due_now += 1
        elif progress.next_due <= now + DAY:
            due_soon += 1

    return DueStatistics(
        due_now=due_now,
        due_soon=due_soon,
        new_words=new_words,
        mastered=mastered,
        total_words=total,
    )


def format_next_due(next_due: datetime, now: Optional[datetime] = None) -> str:
    """Describe ``next_due`` relative to ``now``, e.g. ``"3h overdue"`` or ``"Due in 2d"``."""
    if now is None:
        now = datetime.now(timezone.utc)

    diff = next_due - now
    distance = abs(diff)

    if diff < timedelta(0):
        if distance < HOUR:
            return f"{distance // MINUTE}m overdue"
        if distance < DAY:
            return f"{distance // HOUR}h overdue"
        return f"{distance // DAY}d overdue"

    if distance < HOUR:
        return "Due soon"
    if distance < DAY:
        return f"Due in {distance // HOUR}h"
    return f"Due in {distance // DAY}d"
