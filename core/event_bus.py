"""
Event bus for booking domain events.

Synchronous in-process pub/sub. Handlers run immediately in the publisher's
thread. Handler errors are logged but never propagate: the booking has
already been written by the time its event is published.
"""

import logging
from typing import Callable, Dict, List, Type

from core.events import StudioEvent

logger = logging.getLogger(__name__)

Handler = Callable[[StudioEvent], None]


class EventBus:
    """
    In-process event bus.

    Subscribe by event class. A handler subscribed to a base class (e.g.
    BookingEvent) also receives every subclass event. Handlers run in
    subscription order, most specific class first.
    """

    def __init__(self):
        self._subscribers: Dict[Type[StudioEvent], List[Handler]] = {}

    def subscribe(self, event_type: Type[StudioEvent], callback: Handler) -> None:
        self._subscribers.setdefault(event_type, []).append(callback)

    def unsubscribe(self, event_type: Type[StudioEvent], callback: Handler) -> bool:
        """Remove a handler. Returns False if it was not subscribed."""
        handlers = self._subscribers.get(event_type, [])
        if callback not in handlers:
            return False
        handlers.remove(callback)
        return True

    def publish(self, event: StudioEvent) -> None:
        """Deliver an event to every handler of its class and base classes."""
        for event_type in type(event).__mro__:
            for callback in list(self._subscribers.get(event_type, [])):
                try:
                    callback(event)
                except Exception:
                    logger.exception(
                        "Handler %s failed for %s (event_id=%s)",
                        getattr(callback, "__name__", repr(callback)),
                        type(event).__name__,
                        event.event_id,
                    )
