"""
Subscription operations of the BlogQL façade.

Both operations register with the bus before returning, so no event
published after the call is missed. Callers must cancel the returned
subscription (or use it with `async with`) to release it.
"""

from __future__ import annotations

import logging

from ..errors import NotFoundError
from ..pubsub import POST_TOPIC, Subscription, comment_topic
from .context import Context

logger = logging.getLogger(__name__)


def subscribe_posts(ctx: Context) -> Subscription:
    """Live stream of post CREATED/UPDATED/DELETED events."""
    return ctx.pubsub.subscribe(POST_TOPIC)


def subscribe_comments(ctx: Context, post_id: str) -> Subscription:
    """Live stream of comment events for one post.

    Raises:
        NotFoundError: If the post doesn't exist or is not published
    """
    post = ctx.store.posts.find_by_id(post_id)
    if post is None or not post.published:
        raise NotFoundError("post", post_id, message=f"no published post found: {post_id}")

    logger.debug("Comment subscription opened", extra={"post_id": post_id})
    return ctx.pubsub.subscribe(comment_topic(post_id))
