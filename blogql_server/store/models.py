"""
Entity types held by the in-memory store.

Foreign keys are plain id strings: Post.author and Comment.author
reference User.id, Comment.post references Post.id.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any


@dataclass
class User:
    """A registered user.

    Attributes:
        id: Unique user identifier
        name: Display name (non-empty)
        email: Email address, unique across users (case-sensitive)
        age: Optional age in years
    """

    id: str
    name: str
    email: str
    age: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class Post:
    """A blog post.

    Attributes:
        id: Unique post identifier
        title: Post title
        body: Post body
        published: Whether the post is visible to readers
        author: Id of the authoring user
    """

    id: str
    title: str
    body: str
    published: bool
    author: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class Comment:
    """A comment on a published post.

    Attributes:
        id: Unique comment identifier
        text: Comment text
        author: Id of the authoring user
        post: Id of the post commented on
    """

    id: str
    text: str
    author: str
    post: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
