"""Bootstrap logic for building a practice service and reporting on it."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from src.app.settings import AppSettings
from src.db import get_session_factory, run_migrations_if_needed
from src.db.history import SqlPracticeHistoryStore
from src.db.progress import SqlProgressStore
from src.db.stats import SqlPracticeTotalsStore
from src.practice import PracticeService, load_catalog
from src.scheduler.stats import format_next_due


LOGGER = logging.getLogger(__name__)


def _configure_logging(log_level: str) -> None:
    """Set up project-wide logging configuration."""
    logging.basicConfig(
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        level=log_level,
    )


def build_practice_service(settings: AppSettings, session_factory=None) -> PracticeService:
    """Create a practice service wired to the configured database and catalog."""
    if session_factory is None:
        session_factory = get_session_factory()
    catalog = load_catalog(settings.catalog_path)
    LOGGER.info("Loaded %d catalog items from %s.", len(catalog), settings.catalog_path)
    return PracticeService(
        SqlProgressStore(session_factory),
        catalog,
        weights=settings.weights,
        mastery_threshold=settings.mastery_threshold,
        queue_size=settings.queue_size,
        jitter=settings.jitter,
        min_score=settings.min_score,
        totals=SqlPracticeTotalsStore(session_factory),
        history=SqlPracticeHistoryStore(session_factory),
    )


async def _report(service: PracticeService, preview: int) -> None:
    await service.load()
    stats = service.statistics()
    print(
        f"{stats.total_words} words: {stats.due_now} due now, {stats.due_soon} due soon, "
        f"{stats.new_words} new, {stats.mastered} mastered."
    )
    for item in service.next_queue(preview):
        progress = service.get_progress(item.key)
        due = format_next_due(progress.next_due) if progress is not None else "New"
        print(f"  {item.key} ({', '.join(item.translations)}) - {due}")


def run_report(settings: AppSettings, preview: Optional[int] = 10) -> None:
    """Print due statistics and the head of the practice queue."""
    _configure_logging(settings.log_level)
    LOGGER.info("Starting %s in %s mode.", settings.app_name, settings.app_env)

    try:
        run_migrations_if_needed()
    except Exception:
        LOGGER.exception("Database migrations failed. Aborting startup.")
        raise

    service = build_practice_service(settings)
    asyncio.run(_report(service, preview or 0))
