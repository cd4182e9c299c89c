from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from src.scheduler.srs import (
    MAX_DUE_DAYS,
    MAX_EASINESS_FACTOR,
    MIN_EASINESS_FACTOR,
    calculate_next_interval,
    calculate_next_schedule,
    calculate_quality,
    previous_interval_days,
    update_easiness_factor,
)


@pytest.mark.parametrize("response_time_ms", [None, 0, 500, 2999, 3000, 6999, 7000, 60000])
def test_incorrect_answer_always_grades_two(response_time_ms) -> None:
    assert calculate_quality(False, response_time_ms) == 2


@pytest.mark.parametrize(
    ("response_time_ms", "expected"),
    [(None, 4), (0, 5), (2999, 5), (3000, 4), (6999, 4), (7000, 3), (45000, 3)],
)
def test_correct_answer_grade_depends_on_speed(response_time_ms, expected) -> None:
    assert calculate_quality(True, response_time_ms) == expected


def test_higher_quality_yields_higher_easiness() -> None:
    assert update_easiness_factor(2.0, 5) > update_easiness_factor(2.0, 2)
    assert update_easiness_factor(2.0, 5) == pytest.approx(2.1)
    assert update_easiness_factor(2.0, 4) == pytest.approx(2.0)
    assert update_easiness_factor(2.0, 3) == pytest.approx(1.86)
    assert update_easiness_factor(2.0, 2) == pytest.approx(1.68)


def test_easiness_never_leaves_allowed_range() -> None:
    easiness = MIN_EASINESS_FACTOR
    for _ in range(20):
        easiness = update_easiness_factor(easiness, 2)
        assert easiness >= MIN_EASINESS_FACTOR

    easiness = MAX_EASINESS_FACTOR
    for _ in range(20):
        easiness = update_easiness_factor(easiness, 5)
        assert easiness <= MAX_EASINESS_FACTOR


@pytest.mark.parametrize("previous_interval", [0, 1, 6, 40])
def test_failed_review_resets_interval(previous_interval) -> None:
    assert calculate_next_interval(2, previous_interval, 2.6) == 1


def test_bootstrap_intervals() -> None:
    assert calculate_next_interval(3, 0, 1.3) == 1
    assert calculate_next_interval(5, 0, 2.6) == 1
    assert calculate_next_interval(3, 1, 1.3) == 6
    assert calculate_next_interval(5, 1, 2.6) == 6


def test_interval_grows_with_easiness() -> None:
    assert calculate_next_interval(4, 6, 2.5) == 15
    assert calculate_next_interval(4, 10, 1.3) == 13


def test_previous_interval_is_recovered_from_due_date() -> None:
    reviewed = datetime(2026, 1, 1, 12, tzinfo=timezone.utc)

    assert previous_interval_days(reviewed, reviewed + timedelta(days=6)) == 6
    assert previous_interval_days(reviewed, reviewed) == 0
    assert previous_interval_days(reviewed, reviewed - timedelta(days=2)) == 0


def test_successful_review_increases_interval() -> None:
    now = datetime.now(timezone.utc)
    schedule = calculate_next_schedule(
        quality=5,
        current_easiness=2.5,
        previous_interval=6,
        now=now,
    )

    assert schedule.easiness_factor == pytest.approx(2.6)
    assert schedule.interval == 16  # 6 * 2.6 rounded, using the updated factor
    assert schedule.next_due == now + timedelta(days=16)
    assert schedule.quality == 5


def test_failed_review_resets_progress() -> None:
    now = datetime.now(timezone.utc)
    schedule = calculate_next_schedule(
        quality=2,
        current_easiness=2.2,
        previous_interval=10,
        now=now,
    )

    assert schedule.interval == 1
    assert schedule.next_due == now + timedelta(days=1)
    assert schedule.easiness_factor == pytest.approx(1.88)


def test_far_future_due_date_is_capped() -> None:
    now = datetime(2026, 1, 1, tzinfo=timezone.utc)
    schedule = calculate_next_schedule(
        quality=5,
        current_easiness=2.5,
        previous_interval=40000,
        now=now,
    )

    assert schedule.interval == 104000
    assert schedule.next_due == now + timedelta(days=MAX_DUE_DAYS)
