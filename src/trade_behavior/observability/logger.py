"""Structured logging for wallet analyses.

One ``analyze_wallet`` call is one *analysis*.  Every structlog event
emitted while it runs carries the same ``analysis_id`` so a report can be
traced back through the logs.  Output is JSON for collectors or a
console renderer for local runs, picked by ``ObservabilityConfig``.
"""

from __future__ import annotations

import logging
import sys
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Iterator

import structlog

from ..core.config import ObservabilityConfig

_analysis_id: ContextVar[str] = ContextVar("analysis_id", default="")


def get_analysis_id() -> str:
    """Current analysis ID; one is minted for records outside any analysis."""
    aid = _analysis_id.get()
    if not aid:
        aid = new_analysis_id()
    return aid


def set_analysis_id(analysis_id: str) -> None:
    _analysis_id.set(analysis_id)


def new_analysis_id() -> str:
    aid = uuid.uuid4().hex
    _analysis_id.set(aid)
    return aid


@contextmanager
def analysis_context(**fields: Any) -> Iterator[str]:
    """Scope a fresh analysis ID (plus any *fields*) over one wallet run.

    The previous ID and bound fields are restored on exit, so nested or
    back-to-back analyses in one thread never leak into each other.
    """
    token = _analysis_id.set(uuid.uuid4().hex)
    try:
        with structlog.contextvars.bound_contextvars(**fields):
            yield _analysis_id.get()
    finally:
        _analysis_id.reset(token)


def _add_analysis_id(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Structlog processor stamping each event with the analysis ID."""
    event_dict["analysis_id"] = get_analysis_id()
    return event_dict


def setup_logging(config: ObservabilityConfig | None = None) -> None:
    """Route structlog events through stdlib logging at the configured level.

    Call once at process start; library modules only ever fetch loggers.
    """
    config = config or ObservabilityConfig()
    log_level = getattr(logging, config.log_level.upper(), logging.INFO)

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        _add_analysis_id,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    if config.log_format == "console":
        processors.append(structlog.dev.ConsoleRenderer())
    else:
        processors.append(structlog.processors.JSONRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=log_level)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
