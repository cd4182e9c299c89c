"""Application bootstrap helpers for the Vocab Scheduler project."""

from .runtime import build_practice_service, run_report
from .settings import AppSettings

__all__ = ["build_practice_service", "run_report", "AppSettings"]
