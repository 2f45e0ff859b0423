"""
Cascade engine for dependent deletes.

Deleting a user or post removes everything that references it, so no
surviving post or comment points at a removed parent.

Cascade order for a user delete:
    1. Every post authored by the user
    2. For each of those posts, every comment on it
    3. Every remaining comment authored by the user (on other users' posts)

The order has no observable effect since each step is an independent
set removal, but it is fixed so results are deterministic.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from ..errors import NotFoundError
from .entity_store import EntityStore
from .models import Comment, Post, User

logger = logging.getLogger(__name__)


@dataclass
class CascadeResult:
    """Entities removed by one primary delete.

    Attributes:
        posts: Posts removed, in store order
        comments: Comments removed, in removal order
    """

    posts: list[Post] = field(default_factory=list)
    comments: list[Comment] = field(default_factory=list)


class CascadeEngine:
    """Applies primary deletes together with their cascades.

    Callers must have checked that the primary entity exists and must hold
    the store lock.
    """

    def __init__(self, store: EntityStore) -> None:
        self.store = store

    def delete_user(self, user_id: str) -> tuple[User, CascadeResult]:
        """Remove a user and everything that depends on it.

        Raises:
            NotFoundError: If the user doesn't exist
        """
        if user_id not in self.store.users:
            raise NotFoundError("user", user_id)

        result = CascadeResult()

        result.posts = self.store.posts.remove_where(lambda post: post.author == user_id)
        for post in result.posts:
            result.comments.extend(
                self.store.comments.remove_where(lambda comment, pid=post.id: comment.post == pid)
            )
        result.comments.extend(
            self.store.comments.remove_where(lambda comment: comment.author == user_id)
        )

        user = self.store.users.remove_by_id(user_id)

        logger.debug(
            "User delete cascaded",
            extra={
                "user_id": user_id,
                "posts_removed": len(result.posts),
                "comments_removed": len(result.comments),
            },
        )
        return user, result

    def delete_post(self, post_id: str) -> tuple[Post, CascadeResult]:
        """Remove a post and its comments.

        Raises:
            NotFoundError: If the post doesn't exist
        """
        if post_id not in self.store.posts:
            raise NotFoundError("post", post_id)

        result = CascadeResult()
        result.comments = self.store.comments.remove_where(lambda comment: comment.post == post_id)
        post = self.store.posts.remove_by_id(post_id)

        logger.debug(
            "Post delete cascaded",
            extra={"post_id": post_id, "comments_removed": len(result.comments)},
        )
        return post, result
