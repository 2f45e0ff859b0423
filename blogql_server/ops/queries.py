"""
Read-only operations of the BlogQL façade.

Reads are synchronous and take no lock. Mutations never suspend while
holding the store lock, so a read on the event loop always sees a
complete state.
"""

from __future__ import annotations

from ..errors import NotFoundError
from ..store import Comment, Post, User
from .context import Context


def _matches(query: str, *values: str) -> bool:
    needle = query.lower()
    return any(needle in value.lower() for value in values)


def users(ctx: Context, query: str | None = None) -> list[User]:
    """All users, or those whose name contains `query` (case-insensitive)."""
    if not query:
        return ctx.store.users.list()
    return ctx.store.users.filter(lambda user: _matches(query, user.name))


def posts(ctx: Context, query: str | None = None) -> list[Post]:
    """All posts, or those whose title or body contains `query` (case-insensitive)."""
    if not query:
        return ctx.store.posts.list()
    return ctx.store.posts.filter(lambda post: _matches(query, post.title, post.body))


def comments(ctx: Context) -> list[Comment]:
    return ctx.store.comments.list()


def me(ctx: Context, user_id: str) -> User:
    """The current user.

    Raises:
        NotFoundError: If the user doesn't exist
    """
    user = ctx.store.users.find_by_id(user_id)
    if user is None:
        raise NotFoundError("user", user_id)
    return user


def post(ctx: Context, post_id: str) -> Post:
    """A single post by id.

    Raises:
        NotFoundError: If the post doesn't exist
    """
    found = ctx.store.posts.find_by_id(post_id)
    if found is None:
        raise NotFoundError("post", post_id)
    return found


# =============================================================================
# Relations
# =============================================================================


def user_posts(ctx: Context, user_id: str) -> list[Post]:
    return ctx.store.posts.filter(lambda p: p.author == user_id)


def user_comments(ctx: Context, user_id: str) -> list[Comment]:
    return ctx.store.comments.filter(lambda c: c.author == user_id)


def post_author(ctx: Context, parent: Post) -> User:
    """Author of a post.

    Raises:
        NotFoundError: If the author no longer exists
    """
    author = ctx.store.users.find_by_id(parent.author)
    if author is None:
        raise NotFoundError("user", parent.author)
    return author


def post_comments(ctx: Context, post_id: str) -> list[Comment]:
    return ctx.store.comments.filter(lambda c: c.post == post_id)


def comment_author(ctx: Context, parent: Comment) -> User:
    """Author of a comment, matched by id equality.

    Raises:
        NotFoundError: If the author no longer exists
    """
    author = ctx.store.users.find_by_id(parent.author)
    if author is None:
        raise NotFoundError("user", parent.author)
    return author


def comment_post(ctx: Context, parent: Comment) -> Post:
    """Post a comment belongs to.

    Raises:
        NotFoundError: If the post no longer exists
    """
    found = ctx.store.posts.find_by_id(parent.post)
    if found is None:
        raise NotFoundError("post", parent.post)
    return found
