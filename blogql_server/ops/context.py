"""
Operation context shared by every façade call.

The context replaces process-wide mutable state: callers build one
Context at startup and pass it to each operation.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field

from ..pubsub import InMemoryPubSub, PubSub
from ..store import CascadeEngine, EntityStore, seed_demo_data

logger = logging.getLogger(__name__)


def new_id() -> str:
    """Generate a random opaque id (UUID4)."""
    return str(uuid.uuid4())


@dataclass
class Context:
    """Store, notification bus and id source for the operation façade.

    Attributes:
        store: Entity store holding users, posts and comments
        pubsub: Notification bus for post and comment events
        id_factory: Returns a fresh, never-before-seen id on each call
    """

    store: EntityStore = field(default_factory=EntityStore)
    pubsub: PubSub = field(default_factory=InMemoryPubSub)
    id_factory: Callable[[], str] = new_id

    @property
    def cascade(self) -> CascadeEngine:
        return CascadeEngine(self.store)

    @classmethod
    def create(cls, seed: bool = False) -> Context:
        """Build a context with a fresh in-memory store and bus.

        Args:
            seed: Load the demo dataset into the store
        """
        context = cls()
        if seed:
            seed_demo_data(context.store)
        return context
