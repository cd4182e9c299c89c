"""Practice-session layer sitting between a UI and the scheduling core."""

from .badges import StreakBadge, needs_practice, streak_badge
from .catalog import load_catalog, parse_catalog
from .session import AnswerOutcome, PracticeService

__all__ = [
    "AnswerOutcome",
    "PracticeService",
    "StreakBadge",
    "load_catalog",
    "needs_practice",
    "parse_catalog",
    "streak_badge",
]
