"""Common utilities for permflow."""

from permflow.common.logging import get_logger, setup_logging
from permflow.common.events import EventBus, Event

__all__ = [
    "get_logger",
    "setup_logging",
    "EventBus",
    "Event",
]
