"""SM-2 spaced-repetition math used when recording an answer."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional


MIN_EASINESS_FACTOR = 1.3
MAX_EASINESS_FACTOR = 2.6

FAILED_QUALITY = 2
DEFAULT_CORRECT_QUALITY = 4
FAST_RESPONSE_MS = 3000
MEDIUM_RESPONSE_MS = 7000

DAY = timedelta(days=1)
# Upper bound on how far ahead ``next_due`` may land.
MAX_DUE_DAYS = 36500


@dataclass(slots=True)
class ReviewSchedule:
    """Calculated review data for an item after receiving a quality grade."""

    next_due: datetime
    easiness_factor: float
    interval: int
    quality: int


def calculate_quality(is_correct: bool, response_time_ms: Optional[float] = None) -> int:
    """Grade an answer on the SM-2 scale.

    Incorrect answers always grade 2. Correct answers grade 4 unless a
    response time is known, in which case faster answers grade higher.
    """
    if not is_correct:
        return FAILED_QUALITY
    if response_time_ms is None:
        return DEFAULT_CORRECT_QUALITY
    if response_time_ms < FAST_RESPONSE_MS:
        return 5
    if response_time_ms < MEDIUM_RESPONSE_MS:
        return 4
    return 3


def update_easiness_factor(current_easiness: float, quality: int) -> float:
    """Apply the SM-2 easiness update, clamped to the supported range."""
    penalty = 5 - quality
    easiness_factor = current_easiness + (0.1 - penalty * (0.08 + penalty * 0.02))
    return max(MIN_EASINESS_FACTOR, min(MAX_EASINESS_FACTOR, easiness_factor))


def calculate_next_interval(quality: int, previous_interval: int, easiness_factor: float) -> int:
    """Return the number of days until the next review."""
    if quality < 3:
        return 1
    if previous_interval == 0:
        return 1
    if previous_interval == 1:
        return 6
    return round(previous_interval * easiness_factor)


def previous_interval_days(last_practiced_at: datetime, next_due: datetime) -> int:
    """Recover the interval that produced ``next_due`` from the last review."""
    return max(0, round((next_due - last_practiced_at) / DAY))


def calculate_next_schedule(
    *,
    quality: int,
    current_easiness: float,
    previous_interval: int,
    now: Optional[datetime] = None,
) -> ReviewSchedule:
    """Return the next review schedule for an item graded with ``quality``.

    The easiness factor is updated first and the new value drives the
    interval growth. ``interval`` is reported unclamped while ``next_due`` is
    capped at ``MAX_DUE_DAYS`` from ``now``.
    """
    if now is None:
        now = datetime.now(timezone.utc)

    easiness_factor = update_easiness_factor(current_easiness, quality)
    interval = calculate_next_interval(quality, max(0, previous_interval), easiness_factor)

    return ReviewSchedule(
        next_due=now + min(interval, MAX_DUE_DAYS) * DAY,
        easiness_factor=easiness_factor,
        interval=interval,
        quality=quality,
    )
