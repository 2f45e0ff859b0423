"""
Base protocol and types for the notification bus.

This module defines the PubSub protocol, the change event payload and the
topic naming used for post and comment notifications.

Invariants:
    - A topic is a plain string key
    - All post events share the POST_TOPIC topic
    - Comment events are keyed per post via comment_topic()
    - Event payloads are snapshots and are never mutated after publish

How to change safely:
    - Protocol changes require updating all implementations
    - Keep topic names stable; subscribers are keyed on them
"""

from __future__ import annotations

from abc import abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, AsyncIterator, Generic, Protocol, TypeVar, runtime_checkable

POST_TOPIC = "post"
COMMENT_TOPIC_PREFIX = "comment:"

T = TypeVar("T")


def comment_topic(post_id: str) -> str:
    """Topic carrying comment events for one post."""
    return f"{COMMENT_TOPIC_PREFIX}{post_id}"


class PubSubError(Exception):
    """Base exception for notification bus operations."""

    pass


class PubSubClosedError(PubSubError):
    """Bus was closed and accepts no new subscriptions."""

    pass


class MutationKind(Enum):
    """What happened to the entity carried by a ChangeEvent."""

    CREATED = "CREATED"
    UPDATED = "UPDATED"
    DELETED = "DELETED"


@dataclass(frozen=True)
class ChangeEvent(Generic[T]):
    """A change notification.

    Attributes:
        mutation_kind: Created, updated or deleted
        data: Snapshot of the entity at publish time. For a post that was
            unpublished this is the state before the update.
    """

    mutation_kind: MutationKind
    data: T

    def to_dict(self) -> dict[str, Any]:
        return {"mutationKind": self.mutation_kind.value, "data": self.data.to_dict()}


@runtime_checkable
class Subscription(Protocol[T]):
    """A live, cancellable stream of events for one topic.

    Iteration yields events in publish order, starting at subscription
    time, and ends only after the subscription is cancelled.

    Example:
        >>> async with pubsub.subscribe("post") as events:
        ...     async for event in events:
        ...         print(event.mutation_kind, event.data.id)
    """

    topic: str

    def __aiter__(self) -> AsyncIterator[T]: ...

    async def __anext__(self) -> T: ...

    @property
    @abstractmethod
    def is_active(self) -> bool:
        """Whether the registration still receives events."""
        ...

    @abstractmethod
    def cancel(self) -> None:
        """Release the registration and end iteration."""
        ...

    @abstractmethod
    async def aclose(self) -> None:
        """Async form of cancel()."""
        ...


@runtime_checkable
class PubSub(Protocol):
    """Protocol for topic-keyed publish/subscribe backends.

    Delivery contract:
        - publish() reaches every subscriber registered at call time
        - Publishing to a topic without subscribers is a no-op
        - Every subscriber receives every event (fan-out)
        - Per-topic publish order is preserved for each subscriber
    """

    @abstractmethod
    async def publish(self, topic: str, event: Any) -> int:
        """Deliver an event to the current subscribers of a topic.

        Args:
            topic: Topic name
            event: Payload, typically a ChangeEvent

        Returns:
            Number of subscribers the event was delivered to
        """
        ...

    @abstractmethod
    def subscribe(self, topic: str) -> Subscription[Any]:
        """Register a subscriber for a topic.

        Registration happens immediately, so no event published after this
        call is missed even if iteration starts later.

        Raises:
            PubSubClosedError: If the bus has been closed
        """
        ...

    @abstractmethod
    def subscriber_count(self, topic: str) -> int:
        """Number of active subscribers for a topic."""
        ...

    @abstractmethod
    async def close(self) -> None:
        """Cancel every subscription and refuse new ones."""
        ...
