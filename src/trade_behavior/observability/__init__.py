"""Structured logging for the analytics engine."""

from .logger import (
    analysis_context,
    get_logger,
    new_analysis_id,
    set_analysis_id,
    setup_logging,
)

__all__ = [
    "analysis_context",
    "get_logger",
    "new_analysis_id",
    "set_analysis_id",
    "setup_logging",
]
