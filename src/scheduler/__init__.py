"""Pure review-scheduling core: SM-2 math, mastery tracking and queue selection."""

from .answers import apply_answer
from .mastery import MASTERY_STREAK, MasteryState, just_mastered, mastery_state
from .models import Progress, VocabularyItem
from .priority import PriorityWeights, score_item
from .selection import get_due_items, get_mistake_pool, select_next_items
from .stats import DueStatistics, format_next_due, get_due_statistics, is_due

__all__ = [
    "MASTERY_STREAK",
    "DueStatistics",
    "MasteryState",
    "PriorityWeights",
    "Progress",
    "VocabularyItem",
    "apply_answer",
    "format_next_due",
    "get_due_items",
    "get_due_statistics",
    "get_mistake_pool",
    "is_due",
    "just_mastered",
    "mastery_state",
    "score_item",
    "select_next_items",
]
