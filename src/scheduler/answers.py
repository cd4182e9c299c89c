"""Answer-recording pipeline: grade, reschedule, track streaks and mistakes."""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone
from typing import Dict, Optional

from src.scheduler.mastery import MASTERY_STREAK, advance_streak
from src.scheduler.models import Progress, VocabularyItem, default_progress
from src.scheduler.srs import calculate_next_schedule, calculate_quality, previous_interval_days


STRUGGLING_LEVEL = 0
PRACTICING_LEVEL = 1
CONFIDENT_LEVEL = 2

STRUGGLING_INCORRECT_STREAK = 2
STRUGGLING_ACCURACY = 0.5
CONFIDENT_CORRECT_STREAK = 3


def _record_confusion(confused_with: Dict[str, int], user_answer: Optional[str]) -> Dict[str, int]:
    updated = dict(confused_with)
    answer = user_answer.strip() if user_answer else ""
    if answer:
        updated[answer] = updated.get(answer, 0) + 1
    return updated


def _next_easing_level(progress: Progress, is_correct: bool) -> int:
    # ``progress`` already carries the counters for the current answer.
    if is_correct:
        if progress.consecutive_correct_streak >= CONFIDENT_CORRECT_STREAK:
            return CONFIDENT_LEVEL
        return max(progress.easing_level, PRACTICING_LEVEL)
    if (
        progress.recent_incorrect_streak >= STRUGGLING_INCORRECT_STREAK
        or progress.accuracy < STRUGGLING_ACCURACY
    ):
        return STRUGGLING_LEVEL
    return min(progress.easing_level, PRACTICING_LEVEL)


def apply_answer(
    item: VocabularyItem,
    progress: Optional[Progress],
    is_correct: bool,
    *,
    user_answer: Optional[str] = None,
    response_time_ms: Optional[float] = None,
    now: Optional[datetime] = None,
    mastery_threshold: int = MASTERY_STREAK,
) -> Progress:
    """Return the progress record that results from answering ``item``.

    ``progress`` is left untouched; a missing record is treated as a brand
    new item. Persisting the result is up to the caller.
    """
    if now is None:
        now = datetime.now(timezone.utc)

    if progress is None:
        current = default_progress(item.key, now)
        previous_interval = 0
    else:
        current = progress
        previous_interval = previous_interval_days(progress.last_practiced_at, progress.next_due)

    quality = calculate_quality(is_correct, response_time_ms)
    schedule = calculate_next_schedule(
        quality=quality,
        current_easiness=current.easiness_factor,
        previous_interval=previous_interval,
        now=now,
    )
    streak = advance_streak(current, is_correct, now, mastery_threshold)

    if is_correct:
        recent_incorrect_streak = 0
        confused_with = dict(current.confused_with)
    else:
        recent_incorrect_streak = current.recent_incorrect_streak + 1
        confused_with = _record_confusion(current.confused_with, user_answer)

    updated = replace(
        current,
        times_seen=current.times_seen + 1,
        times_correct=current.times_correct + (1 if is_correct else 0),
        easiness_factor=schedule.easiness_factor,
        next_due=schedule.next_due,
        consecutive_correct_streak=streak.consecutive_correct_streak,
        is_mastered=streak.is_mastered,
        mastered_at=streak.mastered_at,
        recent_incorrect_streak=recent_incorrect_streak,
        confused_with=confused_with,
        last_practiced_at=now,
    )
    updated.easing_level = _next_easing_level(updated, is_correct)
    return updated
