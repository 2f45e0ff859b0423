"""
Notification bus for BlogQL.

This module provides a topic-keyed publish/subscribe interface used to
stream live post and comment changes to subscribers.

Invariants:
    - Subscribers receive only events published after they subscribed
    - Every subscriber of a topic receives every event, in publish order
    - Cancelling a subscription releases its registration

How to change safely:
    - New backends must implement the PubSub protocol
    - Keep topic naming in base.py; publishers and subscribers share it
"""

from .base import (
    COMMENT_TOPIC_PREFIX,
    POST_TOPIC,
    ChangeEvent,
    MutationKind,
    PubSub,
    PubSubClosedError,
    PubSubError,
    Subscription,
    comment_topic,
)
from .memory import InMemoryPubSub, QueueSubscription

__all__ = [
    # Protocol and types
    "PubSub",
    "Subscription",
    "ChangeEvent",
    "MutationKind",
    "PubSubError",
    "PubSubClosedError",
    # Topics
    "POST_TOPIC",
    "COMMENT_TOPIC_PREFIX",
    "comment_topic",
    # Implementations
    "InMemoryPubSub",
    "QueueSubscription",
]
