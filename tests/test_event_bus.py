"""
Unit Tests for Domain Events and the EventBus

Tests for:
- DomainEvent identity and timestamps
- Subscription, unsubscription and delivery order
- Delivery to handlers registered on a base class
- Handler failures (sync and async) being logged, never raised
"""

import asyncio
import logging
from datetime import UTC

import pydantic
import pytest

from elite_media_player.domain.music.entities import Track
from elite_media_player.domain.music.events import (
    LoadFailed,
    QueueChanged,
    SessionEvent,
    TrackChanged,
)
from elite_media_player.domain.music.value_objects import TrackId
from elite_media_player.domain.shared.events import DomainEvent, EventBus

# =============================================================================
# DomainEvent Tests
# =============================================================================


class TestDomainEvent:
    """Unit tests for DomainEvent."""

    def test_event_ids_are_unique(self):
        """Should generate a fresh event id per instance."""
        assert DomainEvent().event_id != DomainEvent().event_id

    def test_occurred_at_is_utc(self):
        """Should stamp events with an aware UTC datetime."""
        assert DomainEvent().occurred_at.tzinfo == UTC

    def test_events_are_immutable(self):
        """Should reject attribute assignment."""
        event = QueueChanged(queue_length=3, current_index=0)
        with pytest.raises(pydantic.ValidationError):
            event.queue_length = 4

    def test_track_changed_from_track(self):
        """from_track copies the id and title."""
        track = Track(id="7", title="Seven", source_url="https://example.com/7.mp3")
        event = TrackChanged.from_track(track, 6)

        assert event.track_id == TrackId("7")
        assert event.track_title == "Seven"
        assert event.queue_index == 6

    def test_track_changed_without_track(self):
        """from_track(None) describes an unloaded session."""
        event = TrackChanged.from_track(None, None)
        assert event.track_id is None
        assert event.track_title == ""

    def test_load_failed_requires_reason(self):
        """A failure must say what went wrong."""
        with pytest.raises(pydantic.ValidationError):
            LoadFailed(track_id="1", reason="")


# =============================================================================
# EventBus Tests
# =============================================================================


class TestEventBus:
    """Unit tests for EventBus delivery."""

    def test_publish_with_no_handlers(self):
        """Should do nothing when nobody listens."""
        EventBus().publish(QueueChanged(queue_length=0))

    def test_handlers_called_in_subscription_order(self):
        """Should call handlers synchronously in the order they subscribed."""
        bus = EventBus()
        calls = []
        bus.subscribe(QueueChanged, lambda e: calls.append("first"))
        bus.subscribe(QueueChanged, lambda e: calls.append("second"))

        bus.publish(QueueChanged(queue_length=1))

        assert calls == ["first", "second"]

    def test_handlers_only_receive_their_type(self):
        """Should not deliver unrelated events."""
        bus = EventBus()
        received = []
        bus.subscribe(QueueChanged, received.append)

        bus.publish(TrackChanged.from_track(None, None))

        assert received == []

    def test_base_class_handler_receives_subclasses(self):
        """A handler on SessionEvent sees every session event exactly once."""
        bus = EventBus()
        received = []
        bus.subscribe(SessionEvent, received.append)

        bus.publish(QueueChanged(queue_length=2))
        bus.publish(TrackChanged.from_track(None, 0))

        assert [type(e) for e in received] == [QueueChanged, TrackChanged]

    def test_unsubscribe_handler(self):
        """Should stop delivering to an unsubscribed handler."""
        bus = EventBus()
        received = []
        bus.subscribe(QueueChanged, received.append)
        bus.unsubscribe(QueueChanged, received.append)

        bus.publish(QueueChanged(queue_length=1))

        assert received == []
        assert bus.handler_count(QueueChanged) == 0

    def test_unsubscribe_unknown_handler(self):
        """Should ignore handlers that were never subscribed."""
        bus = EventBus()
        bus.unsubscribe(QueueChanged, print)
        assert bus.handler_count(QueueChanged) == 0

    def test_handler_may_unsubscribe_itself(self):
        """Unsubscribing during delivery should not skip other handlers."""
        bus = EventBus()
        calls = []

        def once(event):
            calls.append("once")
            bus.unsubscribe(QueueChanged, once)

        bus.subscribe(QueueChanged, once)
        bus.subscribe(QueueChanged, lambda e: calls.append("always"))

        bus.publish(QueueChanged(queue_length=1))
        bus.publish(QueueChanged(queue_length=1))

        assert calls == ["once", "always", "always"]

    def test_failing_handler_is_logged(self, caplog):
        """A raising handler should be logged and later handlers still run."""
        bus = EventBus()
        received = []

        def broken(event):
            raise ValueError("bad handler")

        bus.subscribe(QueueChanged, broken)
        bus.subscribe(QueueChanged, received.append)

        with caplog.at_level(logging.ERROR):
            bus.publish(QueueChanged(queue_length=1))

        assert len(received) == 1
        assert "Error in handler for QueueChanged" in caplog.text

    def test_clear(self):
        """Should remove every handler."""
        bus = EventBus()
        bus.subscribe(QueueChanged, print)
        bus.subscribe(SessionEvent, print)

        bus.clear()

        assert bus.handler_count(QueueChanged) == 0
        assert bus.handler_count(SessionEvent) == 0


class TestEventBusAsyncHandlers:
    """Unit tests for coroutine handlers."""

    @pytest.mark.asyncio
    async def test_async_handler_is_scheduled(self):
        """Coroutine handlers run as tasks on the current loop."""
        bus = EventBus()
        received = []

        async def handler(event):
            received.append(event)

        bus.subscribe(QueueChanged, handler)
        bus.publish(QueueChanged(queue_length=1))

        assert received == []
        await asyncio.sleep(0)
        await asyncio.sleep(0)
        assert len(received) == 1

    @pytest.mark.asyncio
    async def test_async_handler_failure_is_logged(self, caplog):
        """A failing coroutine handler should be logged, not raised."""
        bus = EventBus()

        async def handler(event):
            raise RuntimeError("async boom")

        bus.subscribe(QueueChanged, handler)
        with caplog.at_level(logging.ERROR):
            bus.publish(QueueChanged(queue_length=1))
            for _ in range(3):
                await asyncio.sleep(0)

        assert "async boom" in caplog.text
