"""
Image Storage Event Bus - Ordered, interceptable dispatch for storage events.

Handlers registered for an event type run synchronously in registration order
on the caller's thread. Any handler may intercept:

- call ``event.stop(result)``, or
- return ``False`` (stop without a result), or
- return any other non-None value (stop, value becomes ``event.result``).

The first intercepting handler wins and the remaining handlers are skipped.

Design Decisions:
- Instance-scoped: components receive the bus they publish to; there is no
  process-wide singleton
- Subscriber list guarded by RLock; handlers run outside the lock so they can
  publish nested events
- Bounded history for inspection in tests and diagnostics
- Handler exceptions are logged and re-raised to the dispatching caller

Usage:
    bus = ImageStorageEventBus()

    # Override version paths for one model
    def cdn_paths(event):
        if event.record.model == "Avatar":
            return f"https://cdn.example.com/{event.record.id}/{event.version}.jpg"

    bus.subscribe(VersionResolveEvent, cdn_paths)

    event = bus.dispatch(VersionResolveEvent(record=record, version="thumbnail"))
    event.is_stopped, event.result
"""

from collections import deque
from threading import RLock
from typing import Any, Callable, Dict, List, Optional, Type
import logging

from imagestore.domain.events import ImageStorageEvent

logger = logging.getLogger(__name__)

EventHandler = Callable[[Any], Any]


class ImageStorageEventBus:
    """
    Synchronous event bus with stop-propagation semantics.

    Thread Safety:
    - subscribe/unsubscribe/dispatch may be called from multiple threads
    - Dispatch works on a copy of the subscriber list taken under the lock
    """

    def __init__(self, max_history: int = 1000):
        """
        Initialize the event bus.

        Args:
            max_history: Maximum dispatched events kept in history
        """
        self._lock = RLock()
        self._subscribers: Dict[Type, List[EventHandler]] = {}
        self._event_history: deque = deque(maxlen=max_history)
        self._max_history = max_history

    # ═══════════════════════════════════════════════════════════════
    # Subscription
    # ═══════════════════════════════════════════════════════════════

    def subscribe(self, event_type: Type[ImageStorageEvent], handler: EventHandler) -> None:
        """
        Register a handler for an event type.

        Handlers run in registration order. Registering the same handler twice
        is a no-op.
        """
        with self._lock:
            handlers = self._subscribers.setdefault(event_type, [])
            if handler not in handlers:
                handlers.append(handler)

    def unsubscribe(self, event_type: Type[ImageStorageEvent], handler: EventHandler) -> bool:
        """
        Remove a handler.

        Returns:
            True if the handler was registered
        """
        with self._lock:
            handlers = self._subscribers.get(event_type, [])
            if handler in handlers:
                handlers.remove(handler)
                return True
            return False

    def get_subscriber_count(self, event_type: Optional[Type[ImageStorageEvent]] = None) -> int:
        """Count subscribers for one event type, or all when None."""
        with self._lock:
            if event_type is not None:
                return len(self._subscribers.get(event_type, []))
            return sum(len(h) for h in self._subscribers.values())

    # ═══════════════════════════════════════════════════════════════
    # Dispatch
    # ═══════════════════════════════════════════════════════════════

    def dispatch(self, event: ImageStorageEvent) -> ImageStorageEvent:
        """
        Deliver an event to its handlers until one intercepts.

        Args:
            event: Event instance

        Returns:
            The same event, with is_stopped/result set by handlers
        """
        with self._lock:
            self._event_history.append(event)
            event_type = type(event)
            handlers = self._subscribers.get(event_type, [])[:]

        for handler in handlers:
            try:
                returned = handler(event)
            except Exception:
                logger.exception(f"Error in {event.topic} handler {getattr(handler, '__name__', handler)!r}")
                raise

            if returned is False:
                event.stop()
            elif returned is not None and returned is not True:
                event.stop(returned)

            if event.is_stopped:
                logger.debug(f"{event.topic} stopped by {getattr(handler, '__name__', handler)!r}")
                break

        return event

    # ═══════════════════════════════════════════════════════════════
    # History
    # ═══════════════════════════════════════════════════════════════

    def get_event_history(
        self,
        event_type: Optional[Type[ImageStorageEvent]] = None,
    ) -> List[ImageStorageEvent]:
        """
        Dispatched events, oldest first, optionally filtered by type.
        """
        with self._lock:
            events = list(self._event_history)

        if event_type is not None:
            events = [e for e in events if isinstance(e, event_type)]
        return events

    def clear_history(self) -> None:
        with self._lock:
            self._event_history.clear()
