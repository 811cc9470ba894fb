"""Domain event base class and the in-process event bus."""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from collections.abc import Callable
from typing import Any, TypeVar
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from elite_media_player.domain.shared.datetime_utils import utcnow
from elite_media_player.domain.shared.messages import LogTemplates
from elite_media_player.domain.shared.types import NonEmptyStr, UtcDatetimeField

logger = logging.getLogger(__name__)

T = TypeVar("T", bound="DomainEvent")
EventHandler = Callable[[T], Any]


class DomainEvent(BaseModel):
    """Base class for all domain events."""

    model_config = ConfigDict(frozen=True)

    event_id: NonEmptyStr = Field(default_factory=lambda: str(uuid4()))
    occurred_at: UtcDatetimeField = Field(default_factory=utcnow)


class EventBus:
    """In-process pub/sub bus for domain events.

    Handlers run synchronously, in subscription order, on the publisher's
    thread. A handler subscribed to a base class receives every subclass.
    Handlers that return a coroutine have it scheduled on the running loop.
    Exceptions in handlers are logged and never reach the publisher.
    """

    def __init__(self) -> None:
        self._handlers: dict[type[DomainEvent], list[EventHandler[Any]]] = defaultdict(list)
        self._pending: set[asyncio.Task[Any]] = set()

    def subscribe(self, event_type: type[T], handler: EventHandler[T]) -> None:
        self._handlers[event_type].append(handler)
        logger.debug(LogTemplates.EVENT_SUBSCRIBED, event_type.__name__)

    def unsubscribe(self, event_type: type[T], handler: EventHandler[T]) -> None:
        handlers = self._handlers[event_type]
        if handler in handlers:
            handlers.remove(handler)
            logger.debug(LogTemplates.EVENT_UNSUBSCRIBED, event_type.__name__)

    def handler_count(self, event_type: type[DomainEvent]) -> int:
        return len(self._handlers.get(event_type, []))

    def publish(self, event: DomainEvent) -> None:
        event_type = type(event)
        for cls in event_type.__mro__:
            for handler in list(self._handlers.get(cls, [])):
                self._safe_call(handler, event)

    def _safe_call(self, handler: EventHandler[Any], event: DomainEvent) -> None:
        name = type(event).__name__
        try:
            result = handler(event)
        except Exception:
            logger.exception(LogTemplates.EVENT_HANDLER_FAILED, name)
            return

        if asyncio.iscoroutine(result):
            task = asyncio.get_running_loop().create_task(result)
            self._pending.add(task)
            task.add_done_callback(lambda t: self._on_task_done(t, name))

    def _on_task_done(self, task: asyncio.Task[Any], name: str) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(LogTemplates.EVENT_HANDLER_FAILED, name, exc_info=exc)

    def clear(self) -> None:
        """Remove all handlers."""
        self._handlers.clear()
        logger.debug("Cleared all event handlers")
