"""
In-memory entity store for BlogQL.

This module provides:
- EntityCollection: insertion-ordered collection with id bookkeeping
- EntityStore: the users, posts and comments collections plus the write lock
- CascadeEngine: dependent deletes that keep references consistent
- seed_demo_data: the demo dataset

Invariants:
    - Ids are never reused within a collection
    - No post or comment survives the removal of its parent
"""

from .cascade import CascadeEngine, CascadeResult
from .collection import DuplicateIdError, EntityCollection
from .entity_store import EntityStore
from .models import Comment, Post, User
from .seed import seed_demo_data

__all__ = [
    "CascadeEngine",
    "CascadeResult",
    "Comment",
    "DuplicateIdError",
    "EntityCollection",
    "EntityStore",
    "Post",
    "User",
    "seed_demo_data",
]
