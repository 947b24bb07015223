"""Central event distribution system."""

import asyncio
import inspect
import os
import threading
from collections import defaultdict
from typing import Callable, Dict, List, Type, TypeVar

from ..io.logger import get_logger
from .constants import SystemDefaults
from .events import Event

logger = get_logger("event_bus")


T = TypeVar("T", bound=Event)


class EventBus:
    """Delivers session events to subscribers and keeps a bounded history."""

    def __init__(self, max_history_size: int = SystemDefaults.MAX_EVENT_HISTORY):
        """Initialize EventBus.

        Args:
            max_history_size: Maximum number of events to keep in history
        """
        self.subscribers: Dict[Type[Event], List[Callable]] = defaultdict(list)
        self.event_history: List[Event] = []
        self.max_history_size = max_history_size
        self._history_lock = threading.RLock()
        self._subscriber_lock = threading.RLock()

    def _record(self, event: Event) -> None:
        with self._history_lock:
            self.event_history.append(event)
            if len(self.event_history) > self.max_history_size:
                self.event_history = self.event_history[-self.max_history_size :]

    def _handlers_for(self, event: Event) -> List[Callable]:
        handlers = []
        with self._subscriber_lock:
            for event_type, handler_list in self.subscribers.items():
                if isinstance(event, event_type):
                    handlers.extend(handler_list)
        return handlers

    def _log_handler_error(self, handler: Callable, error: Exception) -> None:
        name = getattr(handler, "__name__", repr(handler))
        error_msg = f"Error in event handler {name}: {error}"
        if os.getenv("TURNTREE_DEBUG"):
            logger.error(error_msg, exc_info=True)
        else:
            logger.error(error_msg)

    async def emit(self, event: Event) -> None:
        """Emit an event to all subscribers.

        Handler failures are logged and never reach the emitter.

        Args:
            event: The event to emit
        """
        self._record(event)
        for handler in self._handlers_for(event):
            try:
                if inspect.iscoroutinefunction(handler):
                    await handler(event)
                else:
                    handler(event)
            except Exception as e:
                self._log_handler_error(handler, e)

    def publish(self, event: Event) -> None:
        """Emit from synchronous code.

        Coroutine handlers are scheduled on the running loop when there is
        one and skipped otherwise.
        """
        self._record(event)
        for handler in self._handlers_for(event):
            try:
                if inspect.iscoroutinefunction(handler):
                    try:
                        loop = asyncio.get_running_loop()
                    except RuntimeError:
                        logger.debug(
                            f"No running loop; skipping async handler for "
                            f"{type(event).__name__}"
                        )
                        continue
                    loop.create_task(handler(event))
                else:
                    handler(event)
            except Exception as e:
                self._log_handler_error(handler, e)

    def subscribe(self, event_type: Type[T], handler: Callable[[T], None]) -> None:
        """Subscribe to events of a specific type.

        Args:
            event_type: The type of event to subscribe to
            handler: The function to call when event is emitted
        """
        with self._subscriber_lock:
            self.subscribers[event_type].append(handler)

    def unsubscribe(self, event_type: Type[T], handler: Callable[[T], None]) -> None:
        """Unsubscribe from events.

        Args:
            event_type: The type of event to unsubscribe from
            handler: The handler to remove
        """
        with self._subscriber_lock:
            if handler in self.subscribers[event_type]:
                self.subscribers[event_type].remove(handler)

    def get_history(self, event_type: Type[T] = None) -> List[Event]:
        """Get event history, optionally filtered by type.

        Args:
            event_type: Optional event type to filter by

        Returns:
            List of events
        """
        with self._history_lock:
            if event_type is None:
                return self.event_history.copy()

            return [e for e in self.event_history if isinstance(e, event_type)]

    def clear_history(self) -> None:
        """Clear the event history."""
        with self._history_lock:
            self.event_history.clear()
