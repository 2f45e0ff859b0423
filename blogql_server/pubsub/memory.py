"""
In-memory notification bus.

Each subscription owns an unbounded asyncio.Queue. Publishing puts the
event on the queue of every subscription registered for the topic.

Invariants:
    - Registration is released on cancel, on `async with` exit and on
      close(); a released subscription holds no reference from the bus
    - Nothing is buffered for topics without subscribers
    - publish() never suspends, so it is safe under the store lock

How to change safely:
    - Keep publish() free of awaits that can suspend
    - Bounded queues would have to drop or block; both break fan-out
      guarantees for slow subscribers
"""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from typing import Any, Dict, Generic, Set, TypeVar

from .base import PubSubClosedError

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Queued after the last event to wake a waiting consumer on cancel
_CLOSED = object()


class QueueSubscription(Generic[T]):
    """Subscription backed by a per-subscriber queue.

    Attributes:
        topic: Topic this subscription listens to

    Example:
        >>> subscription = bus.subscribe("comment:001")
        >>> async with subscription:
        ...     event = await subscription.__anext__()
    """

    def __init__(self, bus: InMemoryPubSub, topic: str) -> None:
        self.topic = topic
        self._bus = bus
        self._queue: asyncio.Queue[Any] = asyncio.Queue()
        self._active = True

    @property
    def is_active(self) -> bool:
        return self._active

    @property
    def pending(self) -> int:
        """Events delivered but not yet consumed."""
        return self._queue.qsize()

    def _deliver(self, event: T) -> None:
        self._queue.put_nowait(event)

    def __aiter__(self) -> QueueSubscription[T]:
        return self

    async def __anext__(self) -> T:
        if not self._active and self._queue.empty():
            raise StopAsyncIteration
        item = await self._queue.get()
        if item is _CLOSED:
            raise StopAsyncIteration
        return item

    def cancel(self) -> None:
        """Release the registration and end iteration.

        Events already queued are discarded. Calling cancel() twice is
        harmless.
        """
        if not self._active:
            return
        self._active = False
        self._bus._unregister(self)
        while not self._queue.empty():
            self._queue.get_nowait()
        self._queue.put_nowait(_CLOSED)

    async def aclose(self) -> None:
        self.cancel()

    async def __aenter__(self) -> QueueSubscription[T]:
        return self

    async def __aexit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        self.cancel()

    # Testing helpers

    def drain(self) -> list[T]:
        """Remove and return every queued event without waiting (testing helper)."""
        events = []
        while not self._queue.empty():
            item = self._queue.get_nowait()
            if item is not _CLOSED:
                events.append(item)
        return events


class InMemoryPubSub:
    """In-memory implementation of the PubSub protocol.

    Thread safety:
        Single event loop only. publish() and subscribe() must be called
        from the loop that consumes the subscriptions.

    Example:
        >>> bus = InMemoryPubSub()
        >>> subscription = bus.subscribe("post")
        >>> await bus.publish("post", event)
        1
    """

    def __init__(self) -> None:
        self._subscriptions: Dict[str, Set[QueueSubscription[Any]]] = defaultdict(set)
        self._closed = False

    @property
    def is_closed(self) -> bool:
        return self._closed

    async def publish(self, topic: str, event: Any) -> int:
        """Deliver an event to every current subscriber of the topic.

        Returns:
            Number of subscribers the event was delivered to
        """
        subscribers = self._subscriptions.get(topic)
        if not subscribers:
            logger.debug("Publish without subscribers", extra={"topic": topic})
            return 0

        for subscription in subscribers:
            subscription._deliver(event)

        logger.debug(
            "Event published",
            extra={"topic": topic, "subscribers": len(subscribers)},
        )
        return len(subscribers)

    def subscribe(self, topic: str) -> QueueSubscription[Any]:
        """Register a new subscription for the topic.

        Raises:
            PubSubClosedError: If the bus has been closed
        """
        if self._closed:
            raise PubSubClosedError("Bus is closed")

        subscription: QueueSubscription[Any] = QueueSubscription(self, topic)
        self._subscriptions[topic].add(subscription)
        logger.debug("Subscription registered", extra={"topic": topic})
        return subscription

    def subscriber_count(self, topic: str) -> int:
        return len(self._subscriptions.get(topic, ()))

    def topics(self) -> list[str]:
        """Topics with at least one active subscriber."""
        return sorted(self._subscriptions)

    async def close(self) -> None:
        """Cancel every subscription and refuse new ones."""
        self._closed = True
        for subscribers in list(self._subscriptions.values()):
            for subscription in list(subscribers):
                subscription.cancel()
        self._subscriptions.clear()
        logger.debug("InMemoryPubSub closed")

    def _unregister(self, subscription: QueueSubscription[Any]) -> None:
        subscribers = self._subscriptions.get(subscription.topic)
        if subscribers is None:
            return
        subscribers.discard(subscription)
        if not subscribers:
            del self._subscriptions[subscription.topic]
        logger.debug("Subscription released", extra={"topic": subscription.topic})
