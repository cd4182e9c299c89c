"""Configuration helpers for the Vocab Scheduler runtime."""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from src.scheduler.mastery import MASTERY_STREAK
from src.scheduler.priority import PriorityWeights
from src.scheduler.selection import DEFAULT_QUEUE_SIZE


DEFAULT_CATALOG_PATH = "lexemes.json"
DEFAULT_JITTER = 0.1
DEFAULT_RECENCY_WINDOW_MINUTES = 30.0


def _read_float(name: str, default: Optional[float]) -> Optional[float]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise RuntimeError(f"{name} must be a number.") from exc


def _read_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise RuntimeError(f"{name} must be an integer.") from exc


@dataclass(frozen=True)
class AppSettings:
    """Strongly typed application settings loaded from environment variables."""

    app_name: str
    app_env: str
    log_level: str
    catalog_path: str
    weights: PriorityWeights
    mastery_threshold: int
    queue_size: int
    jitter: float
    min_score: Optional[float]

    @classmethod
    def from_env(cls) -> AppSettings:
        """Construct settings directly from environment variables."""
        app_name = os.getenv("APP_NAME", "Vocab Scheduler")
        app_env = os.getenv("APP_ENV", "development")
        log_level = os.getenv("LOG_LEVEL", "INFO")
        catalog_path = os.getenv("CATALOG_PATH", DEFAULT_CATALOG_PATH)

        defaults = PriorityWeights()
        recency_minutes = _read_float("SCHEDULER_RECENCY_WINDOW_MINUTES", DEFAULT_RECENCY_WINDOW_MINUTES)
        if recency_minutes <= 0:
            raise RuntimeError("SCHEDULER_RECENCY_WINDOW_MINUTES must be positive.")

        weights = PriorityWeights(
            overdue=_read_float("SCHEDULER_WEIGHT_OVERDUE", defaults.overdue),
            accuracy=_read_float("SCHEDULER_WEIGHT_ACCURACY", defaults.accuracy),
            difficulty=_read_float("SCHEDULER_WEIGHT_DIFFICULTY", defaults.difficulty),
            recency=_read_float("SCHEDULER_WEIGHT_RECENCY", defaults.recency),
            new_word=_read_float("SCHEDULER_WEIGHT_NEW_WORD", defaults.new_word),
            recency_window=timedelta(minutes=recency_minutes),
        )

        mastery_threshold = _read_int("SCHEDULER_MASTERY_STREAK", MASTERY_STREAK)
        if mastery_threshold < 1:
            raise RuntimeError("SCHEDULER_MASTERY_STREAK must be a positive integer.")

        queue_size = _read_int("SCHEDULER_QUEUE_SIZE", DEFAULT_QUEUE_SIZE)
        if queue_size < 1:
            raise RuntimeError("SCHEDULER_QUEUE_SIZE must be a positive integer.")

        jitter = _read_float("SCHEDULER_JITTER", DEFAULT_JITTER)
        if jitter < 0 or jitter >= 1:
            raise RuntimeError("SCHEDULER_JITTER must be between 0 (inclusive) and 1 (exclusive).")

        min_score = _read_float("SCHEDULER_MIN_SCORE", None)

        return cls(
            app_name=app_name,
            app_env=app_env,
            log_level=log_level,
            catalog_path=catalog_path,
            weights=weights,
            mastery_threshold=mastery_threshold,
            queue_size=queue_size,
            jitter=jitter,
            min_score=min_score,
        )
