"""
Typed publish/subscribe channel.

Replaces ad-hoc global events for cross-component signals (for example the
"transform ready" notification). Each channel carries one event type and is
passed explicitly to the components that publish or listen.
"""

import logging
from typing import Callable, Generic, List, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class EventChannel(Generic[T]):
    """Synchronous in-process channel for events of type T."""

    def __init__(self, name: str = "events"):
        self.name = name
        self._subscribers: List[Callable[[T], None]] = []

    def subscribe(self, callback: Callable[[T], None]) -> Callable[[], None]:
        """Register callback; returns a function that unsubscribes it."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def publish(self, event: T) -> int:
        """
        Deliver event to every subscriber.

        A failing subscriber is logged and does not stop delivery to the
        others.

        Returns:
            Number of subscribers that handled the event without error
        """
        delivered = 0
        for callback in list(self._subscribers):
            try:
                callback(event)
                delivered += 1
            except Exception as e:
                logger.error(f"Subscriber {callback!r} on channel '{self.name}' failed: {e}", exc_info=True)
        return delivered

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)
