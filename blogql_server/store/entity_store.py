"""
In-memory entity store for BlogQL.

The store owns the three collections (users, posts, comments) for the
lifetime of the process. Nothing is persisted.

Invariants:
    - One store per process, passed by reference through the ops Context
    - Mutating operations hold `lock` for validation, mutation, cascade
      and notification as one unit
    - Code holding the lock never awaits anything that can suspend

How to change safely:
    - Add new entity types as new collections and extend `counts()`
    - Keep reads lock-free; they rely on mutations never yielding
"""

from __future__ import annotations

import asyncio
import logging

from .collection import EntityCollection
from .models import Comment, Post, User

logger = logging.getLogger(__name__)


class EntityStore:
    """Users, posts and comments held in memory.

    Attributes:
        users: User collection
        posts: Post collection
        comments: Comment collection
        lock: Serializes mutating operations

    Example:
        >>> store = EntityStore()
        >>> store.users.insert(User(id="1", name="Jane", email="jane@example.com"))
        >>> store.counts()
        {'users': 1, 'posts': 0, 'comments': 0}
    """

    def __init__(self) -> None:
        self.users: EntityCollection[User] = EntityCollection("user")
        self.posts: EntityCollection[Post] = EntityCollection("post")
        self.comments: EntityCollection[Comment] = EntityCollection("comment")
        self.lock = asyncio.Lock()

    def counts(self) -> dict[str, int]:
        """Number of entities per collection."""
        return {
            "users": len(self.users),
            "posts": len(self.posts),
            "comments": len(self.comments),
        }
