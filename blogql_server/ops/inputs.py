"""
Argument structures for the operation façade.

Create inputs carry every field except the id. Update inputs carry only
the fields to change: a field left at UNSET is absent and stays untouched,
which is different from a field explicitly set to None or a falsy value.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any


class _Unset:
    """Marker type for an absent update field."""

    _instance: _Unset | None = None

    def __new__(cls) -> _Unset:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()


class _PartialInput:
    """Mixin for update inputs."""

    def changes(self) -> dict[str, Any]:
        """Fields that are present, mapped to their new values."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)  # type: ignore[arg-type]
            if getattr(self, f.name) is not UNSET
        }


@dataclass(frozen=True)
class CreateUserInput:
    name: str
    email: str
    age: int | None = None


@dataclass(frozen=True)
class UpdateUserInput(_PartialInput):
    """Partial user update. `age=None` clears the age."""

    name: str = UNSET
    email: str = UNSET
    age: int | None = UNSET


@dataclass(frozen=True)
class CreatePostInput:
    title: str
    body: str
    published: bool
    author: str


@dataclass(frozen=True)
class UpdatePostInput(_PartialInput):
    title: str = UNSET
    body: str = UNSET
    published: bool = UNSET


@dataclass(frozen=True)
class CreateCommentInput:
    text: str
    author: str
    post: str


@dataclass(frozen=True)
class UpdateCommentInput(_PartialInput):
    """Partial comment update; only the text can change."""

    text: str = UNSET
