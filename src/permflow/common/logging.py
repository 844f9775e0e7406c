"""Structured logging for permflow."""

from __future__ import annotations

import logging
import sys
from enum import Enum
from typing import Any

import structlog
from structlog.types import EventDict, Processor


def render_enums(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Log enum members (categories, statuses) by their value."""
    for key, value in event_dict.items():
        if isinstance(value, Enum):
            event_dict[key] = value.value
    return event_dict


def setup_logging(
    level: str = "INFO",
    json_output: bool = False,
    session: str | None = None,
) -> None:
    """Configure structured logging.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR).
        json_output: One JSON object per line instead of console output.
        session: Session name bound to every entry.
    """
    log_level = getattr(logging, level.upper())
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=log_level)

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        render_enums,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if json_output:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )

    if session:
        structlog.contextvars.bind_contextvars(session=session)


def get_logger(name: str | None = None, **initial_values: Any) -> structlog.BoundLogger:
    """Get a logger, optionally with context values bound."""
    logger = structlog.get_logger(name)
    if initial_values:
        logger = logger.bind(**initial_values)
    return logger
