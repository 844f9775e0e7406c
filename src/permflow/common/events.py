"""In-process event bus used to observe permission state changes."""

from __future__ import annotations

import asyncio
import time
import uuid
from dataclasses import dataclass, field
from fnmatch import fnmatchcase
from typing import Callable, Awaitable

from permflow.common.logging import get_logger


@dataclass(kw_only=True)
class Event:
    """Base event; subclasses define the topic they are published on."""

    source: str
    event_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: float = field(default_factory=time.time)

    @property
    def topic(self) -> str:
        raise NotImplementedError


EventHandler = Callable[[Event], Awaitable[None]]


class EventBus:
    """Dispatches events to handlers subscribed by topic pattern.

    Patterns use shell-style wildcards, so ``permissions.*`` receives every
    permission event. Handlers run concurrently per publish; a failing
    handler is logged and does not affect the others.
    """

    def __init__(self) -> None:
        self._handlers: list[tuple[str, EventHandler]] = []
        self.logger = get_logger("event_bus")

    async def publish(self, event: Event) -> None:
        """Deliver ``event`` to every handler whose pattern matches its topic."""
        handlers = [h for pattern, h in self._handlers if fnmatchcase(event.topic, pattern)]
        self.logger.debug(
            "publishing_event",
            topic=event.topic,
            event_id=event.event_id,
            handlers=len(handlers),
        )

        if handlers:
            await asyncio.gather(
                *[self._safe_dispatch(handler, event) for handler in handlers],
                return_exceptions=True,
            )

    async def _safe_dispatch(self, handler: EventHandler, event: Event) -> None:
        try:
            await handler(event)
        except Exception as e:
            self.logger.exception(
                "event_handler_error",
                topic=event.topic,
                event_id=event.event_id,
                error=str(e),
            )

    def subscribe(self, pattern: str, handler: EventHandler) -> Callable[[], None]:
        """Register ``handler`` for topics matching ``pattern``.

        Returns:
            Function removing the subscription.
        """
        entry = (pattern, handler)
        self._handlers.append(entry)
        self.logger.debug("subscribed", pattern=pattern)

        def unsubscribe() -> None:
            if entry in self._handlers:
                self._handlers.remove(entry)

        return unsubscribe
