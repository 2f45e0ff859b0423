"""
Operation façade for BlogQL.

Each operation takes a Context and typed arguments, checks its
preconditions, mutates the store (cascades included), publishes change
events, and returns plain entities or raises a BlogQLError.

Invariants:
    - Operations know nothing about GraphQL, HTTP or serialization
    - A failed operation leaves the store unchanged
"""

from .context import Context, new_id
from .inputs import (
    UNSET,
    CreateCommentInput,
    CreatePostInput,
    CreateUserInput,
    UpdateCommentInput,
    UpdatePostInput,
    UpdateUserInput,
)
from .mutations import (
    create_comment,
    create_post,
    create_user,
    delete_comment,
    delete_post,
    delete_user,
    update_comment,
    update_post,
    update_user,
)
from .queries import (
    comment_author,
    comment_post,
    comments,
    me,
    post,
    post_author,
    post_comments,
    posts,
    user_comments,
    user_posts,
    users,
)
from .subscriptions import subscribe_comments, subscribe_posts

__all__ = [
    # Context and inputs
    "Context",
    "new_id",
    "UNSET",
    "CreateUserInput",
    "UpdateUserInput",
    "CreatePostInput",
    "UpdatePostInput",
    "CreateCommentInput",
    "UpdateCommentInput",
    # Mutations
    "create_user",
    "delete_user",
    "update_user",
    "create_post",
    "delete_post",
    "update_post",
    "create_comment",
    "delete_comment",
    "update_comment",
    # Queries
    "users",
    "posts",
    "comments",
    "me",
    "post",
    "user_posts",
    "user_comments",
    "post_author",
    "post_comments",
    "comment_author",
    "comment_post",
    # Subscriptions
    "subscribe_posts",
    "subscribe_comments",
]
