"""
Mutating operations of the BlogQL façade.

Every operation follows the same shape under the store lock:
    precondition checks -> mutation (with cascades) -> notification

Invariants:
    - All checks run before the first mutation; a raised error leaves the
      store exactly as it was
    - Notifications are published while the lock is held, so subscribers
      see events in mutation order
    - Published payloads are snapshots independent of returned entities

Notifications:
    create_post     CREATED on "post" if published
    delete_post     DELETED on "post" if the removed post was published
    update_post     DELETED (pre-update snapshot) on true->false,
                    CREATED on false->true, UPDATED while published
    create_comment  CREATED on "comment:<post>"
    delete_comment  DELETED on "comment:<post>"
    update_comment  UPDATED on "comment:<post>"
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Any

from ..errors import DuplicateEmailError, InvalidReferenceError, NotFoundError, ValidationError
from ..pubsub import POST_TOPIC, ChangeEvent, MutationKind, comment_topic
from ..store import Comment, Post, User
from .context import Context
from .inputs import (
    UNSET,
    CreateCommentInput,
    CreatePostInput,
    CreateUserInput,
    UpdateCommentInput,
    UpdatePostInput,
    UpdateUserInput,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Validation helpers
# =============================================================================


def _require_string(value: Any, field_name: str, allow_empty: bool = True) -> None:
    if not isinstance(value, str):
        raise ValidationError(f"{field_name} must be a string", field_name=field_name)
    if not allow_empty and not value:
        raise ValidationError(f"{field_name} must not be empty", field_name=field_name)


def _require_bool(value: Any, field_name: str) -> None:
    if not isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a boolean", field_name=field_name)


def _require_age(value: Any) -> None:
    if value is None:
        return
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError("age must be an integer", field_name="age")


async def _notify(ctx: Context, topic: str, kind: MutationKind, entity: Any) -> None:
    await ctx.pubsub.publish(topic, ChangeEvent(kind, dataclasses.replace(entity)))


# =============================================================================
# Users
# =============================================================================


async def create_user(ctx: Context, data: CreateUserInput) -> User:
    """Create a user with a fresh id.

    Raises:
        ValidationError: If name or email is empty, or age is not an int
        DuplicateEmailError: If the email belongs to an existing user
    """
    _require_string(data.name, "name", allow_empty=False)
    _require_string(data.email, "email", allow_empty=False)
    _require_age(data.age)

    async with ctx.store.lock:
        if ctx.store.users.any(lambda user: user.email == data.email):
            raise DuplicateEmailError(data.email)

        user = ctx.store.users.insert(
            User(id=ctx.id_factory(), name=data.name, email=data.email, age=data.age)
        )

    logger.info("User created", extra={"user_id": user.id})
    return user


async def delete_user(ctx: Context, user_id: str) -> User:
    """Delete a user together with their posts and all dependent comments.

    Raises:
        NotFoundError: If the user doesn't exist
    """
    async with ctx.store.lock:
        user, cascade = ctx.cascade.delete_user(user_id)

    logger.info(
        "User deleted",
        extra={
            "user_id": user_id,
            "posts_removed": len(cascade.posts),
            "comments_removed": len(cascade.comments),
        },
    )
    return user


async def update_user(ctx: Context, user_id: str, data: UpdateUserInput) -> User:
    """Apply the fields present in `data` to a user.

    Raises:
        NotFoundError: If the user doesn't exist
        ValidationError: If a present field has the wrong type
        DuplicateEmailError: If the email belongs to a different user
    """
    changes = data.changes()
    if "name" in changes:
        _require_string(changes["name"], "name", allow_empty=False)
    if "email" in changes:
        _require_string(changes["email"], "email", allow_empty=False)
    if "age" in changes:
        _require_age(changes["age"])

    async with ctx.store.lock:
        if user_id not in ctx.store.users:
            raise NotFoundError("user", user_id)

        if data.email is not UNSET and ctx.store.users.any(
            lambda user: user.email == data.email and user.id != user_id
        ):
            raise DuplicateEmailError(data.email)

        user = ctx.store.users.update(user_id, changes)

    logger.info("User updated", extra={"user_id": user_id, "fields": sorted(changes)})
    return user


# =============================================================================
# Posts
# =============================================================================


async def create_post(ctx: Context, data: CreatePostInput) -> Post:
    """Create a post for an existing author.

    Raises:
        ValidationError: If a field has the wrong type
        InvalidReferenceError: If the author doesn't exist
    """
    _require_string(data.title, "title")
    _require_string(data.body, "body")
    _require_bool(data.published, "published")

    async with ctx.store.lock:
        if data.author not in ctx.store.users:
            raise InvalidReferenceError("user", data.author)

        post = ctx.store.posts.insert(
            Post(
                id=ctx.id_factory(),
                title=data.title,
                body=data.body,
                published=data.published,
                author=data.author,
            )
        )
        if post.published:
            await _notify(ctx, POST_TOPIC, MutationKind.CREATED, post)

    logger.info("Post created", extra={"post_id": post.id, "author": post.author})
    return post


async def delete_post(ctx: Context, post_id: str) -> Post:
    """Delete a post and its comments.

    Raises:
        NotFoundError: If the post doesn't exist
    """
    async with ctx.store.lock:
        post, cascade = ctx.cascade.delete_post(post_id)
        if post.published:
            await _notify(ctx, POST_TOPIC, MutationKind.DELETED, post)

    logger.info(
        "Post deleted",
        extra={"post_id": post_id, "comments_removed": len(cascade.comments)},
    )
    return post


async def update_post(ctx: Context, post_id: str, data: UpdatePostInput) -> Post:
    """Apply the fields present in `data` to a post.

    Unpublishing is announced as a delete carrying the post as it was
    before the update; publishing is announced as a create.

    Raises:
        NotFoundError: If the post doesn't exist
        ValidationError: If a present field has the wrong type
    """
    changes = data.changes()
    for name in ("title", "body"):
        if name in changes:
            _require_string(changes[name], name)
    if "published" in changes:
        _require_bool(changes["published"], "published")

    async with ctx.store.lock:
        before = ctx.store.posts.find_by_id(post_id)
        if before is None:
            raise NotFoundError("post", post_id)

        post = ctx.store.posts.update(post_id, changes)

        if before.published and not post.published:
            await _notify(ctx, POST_TOPIC, MutationKind.DELETED, before)
        elif not before.published and post.published:
            await _notify(ctx, POST_TOPIC, MutationKind.CREATED, post)
        elif post.published:
            await _notify(ctx, POST_TOPIC, MutationKind.UPDATED, post)

    logger.info("Post updated", extra={"post_id": post_id, "fields": sorted(changes)})
    return post


# =============================================================================
# Comments
# =============================================================================


async def create_comment(ctx: Context, data: CreateCommentInput) -> Comment:
    """Create a comment on a published post.

    Raises:
        ValidationError: If the text is not a string
        InvalidReferenceError: If the author doesn't exist, or the post
            doesn't exist or is unpublished
    """
    _require_string(data.text, "text")

    async with ctx.store.lock:
        if data.author not in ctx.store.users:
            raise InvalidReferenceError("user", data.author)

        post = ctx.store.posts.find_by_id(data.post)
        if post is None:
            raise InvalidReferenceError("post", data.post)
        if not post.published:
            raise InvalidReferenceError("post", data.post, reason="is not published")

        comment = ctx.store.comments.insert(
            Comment(id=ctx.id_factory(), text=data.text, author=data.author, post=data.post)
        )
        await _notify(ctx, comment_topic(comment.post), MutationKind.CREATED, comment)

    logger.info("Comment created", extra={"comment_id": comment.id, "post_id": comment.post})
    return comment


async def delete_comment(ctx: Context, comment_id: str) -> Comment:
    """Delete a comment.

    Raises:
        NotFoundError: If the comment doesn't exist
    """
    async with ctx.store.lock:
        comment = ctx.store.comments.remove_by_id(comment_id)
        await _notify(ctx, comment_topic(comment.post), MutationKind.DELETED, comment)

    logger.info("Comment deleted", extra={"comment_id": comment_id, "post_id": comment.post})
    return comment


async def update_comment(ctx: Context, comment_id: str, data: UpdateCommentInput) -> Comment:
    """Replace a comment's text if present in `data`.

    Raises:
        NotFoundError: If the comment doesn't exist
        ValidationError: If the text is not a string
    """
    changes = data.changes()
    if "text" in changes:
        _require_string(changes["text"], "text")

    async with ctx.store.lock:
        comment = ctx.store.comments.update(comment_id, changes)
        await _notify(ctx, comment_topic(comment.post), MutationKind.UPDATED, comment)

    logger.info("Comment updated", extra={"comment_id": comment_id, "post_id": comment.post})
    return comment
