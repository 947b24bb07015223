"""Tests for EventBus."""

import asyncio
from unittest.mock import patch

import pytest

from turntree.core.event_bus import EventBus
from turntree.core.events import (
    AnchorChangedEvent,
    Event,
    SelectionChangedEvent,
    TreeRebuiltEvent,
)


def selection(node_id="n1"):
    return SelectionChangedEvent(session_id="s", node_id=node_id)


class TestEventBus:
    @pytest.mark.asyncio
    async def test_basic_emit_subscribe(self, event_bus):
        received = []
        event_bus.subscribe(SelectionChangedEvent, received.append)

        event = selection()
        await event_bus.emit(event)

        assert received == [event]

    @pytest.mark.asyncio
    async def test_async_handler(self, event_bus):
        received = []

        async def handler(event):
            received.append(event)

        event_bus.subscribe(SelectionChangedEvent, handler)
        await event_bus.emit(selection())
        assert len(received) == 1

    @pytest.mark.asyncio
    async def test_base_class_subscription(self, event_bus):
        received = []
        event_bus.subscribe(Event, received.append)

        await event_bus.emit(selection())
        await event_bus.emit(AnchorChangedEvent(session_id="s", node_id=None))

        assert len(received) == 2

    @pytest.mark.asyncio
    async def test_only_matching_type(self, event_bus):
        received = []
        event_bus.subscribe(AnchorChangedEvent, received.append)
        await event_bus.emit(selection())
        assert received == []

    @pytest.mark.asyncio
    async def test_handler_error_is_logged_not_raised(self, event_bus):
        received = []

        def broken(event):
            raise RuntimeError("handler broke")

        event_bus.subscribe(SelectionChangedEvent, broken)
        event_bus.subscribe(SelectionChangedEvent, received.append)

        with patch("turntree.core.event_bus.logger") as mock_logger:
            await event_bus.emit(selection())

        assert len(received) == 1
        mock_logger.error.assert_called_once()
        assert "handler broke" in mock_logger.error.call_args[0][0]

    def test_publish_runs_sync_handlers(self, event_bus):
        received = []
        event_bus.subscribe(SelectionChangedEvent, received.append)
        event_bus.publish(selection())
        assert len(received) == 1

    def test_publish_without_loop_skips_async_handlers(self, event_bus):
        called = []

        async def handler(event):
            called.append(event)

        event_bus.subscribe(SelectionChangedEvent, handler)
        event_bus.publish(selection())
        assert called == []
        assert len(event_bus.get_history()) == 1

    @pytest.mark.asyncio
    async def test_publish_schedules_async_handlers_on_running_loop(self, event_bus):
        called = []

        async def handler(event):
            called.append(event)

        event_bus.subscribe(SelectionChangedEvent, handler)
        event_bus.publish(selection())
        await asyncio.sleep(0)
        assert len(called) == 1

    def test_unsubscribe(self, event_bus):
        received = []
        event_bus.subscribe(SelectionChangedEvent, received.append)
        event_bus.unsubscribe(SelectionChangedEvent, received.append)
        event_bus.publish(selection())
        assert received == []

    def test_unsubscribe_unknown_handler_is_noop(self, event_bus):
        event_bus.unsubscribe(SelectionChangedEvent, print)

    def test_history_filter(self, event_bus):
        event_bus.publish(selection())
        event_bus.publish(
            TreeRebuiltEvent(session_id="s", node_count=1, root_count=1, divergence_count=0)
        )
        assert len(event_bus.get_history()) == 2
        assert len(event_bus.get_history(TreeRebuiltEvent)) == 1

    def test_history_is_bounded(self):
        bus = EventBus(max_history_size=3)
        for i in range(5):
            bus.publish(selection(f"n{i}"))
        history = bus.get_history()
        assert [e.node_id for e in history] == ["n2", "n3", "n4"]

    def test_clear_history(self, event_bus):
        event_bus.publish(selection())
        event_bus.clear_history()
        assert event_bus.get_history() == []

    def test_events_get_ids_and_timestamps(self):
        first, second = selection(), selection()
        assert first.event_id != second.event_id
        assert first.timestamp.tzinfo is not None
