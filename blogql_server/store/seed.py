"""
Demo dataset loaded at startup.

Entities are inserted directly, bypassing the operation façade, so the
seed may contain states the façade would refuse (comments on the
unpublished post 003).
"""

from __future__ import annotations

import logging

from .entity_store import EntityStore
from .models import Comment, Post, User

logger = logging.getLogger(__name__)

DEMO_USERS = [
    User(id="1", name="Jane", email="info@infoesque.net"),
    User(id="2", name="John", email="info2@infoesque.net"),
    User(id="3", name="Mike", email="info3@infoesque.net"),
]

DEMO_POSTS = [
    Post(id="001", title="Post Title 1", body="Some Lorem for post 1", published=True, author="1"),
    Post(id="002", title="Post Title 2", body="Some Lorem for post 2", published=True, author="1"),
    Post(id="003", title="Post Title 3", body="Some Lorem for post 3", published=False, author="3"),
]

DEMO_COMMENTS = [
    Comment(id="001", text="comment for 1", author="2", post="001"),
    Comment(id="002", text="comment for 2", author="3", post="003"),
    Comment(id="003", text="comment for 3", author="3", post="001"),
    Comment(id="004", text="comment for 4", author="1", post="003"),
]


def seed_demo_data(store: EntityStore) -> None:
    """Insert the demo users, posts and comments into an empty store.

    Raises:
        ValueError: If the store already holds entities
    """
    if any(store.counts().values()):
        raise ValueError("Demo data can only be seeded into an empty store")

    for user in DEMO_USERS:
        store.users.insert(user)
    for post in DEMO_POSTS:
        store.posts.insert(post)
    for comment in DEMO_COMMENTS:
        store.comments.insert(comment)

    logger.info("Demo data seeded", extra=store.counts())
