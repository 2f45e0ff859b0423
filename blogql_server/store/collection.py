"""
Ordered in-memory collection of entities.

One EntityCollection holds all entities of one type, in insertion order.

Invariants:
    - Order is insertion order; update never moves an entity
    - An id is accepted by insert() at most once for the collection's lifetime
    - Readers get copies, never references into the collection
    - Missing ids raise NotFoundError instead of passing silently

How to change safely:
    - Keep all mutations synchronous so a caller holding the store lock
      never yields mid-mutation
    - Type checking of field values belongs to the operation façade
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Callable, Mapping
from typing import Any, Generic, TypeVar

from ..errors import NotFoundError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class DuplicateIdError(ValueError):
    """Id is already in use or was used by a removed entity."""

    pass


class EntityCollection(Generic[T]):
    """Insertion-ordered collection of dataclass entities keyed by `id`.

    Attributes:
        resource_type: Name used in errors and logs ("user", "post", ...)

    Example:
        >>> users = EntityCollection("user")
        >>> users.insert(User(id="1", name="Jane", email="jane@example.com"))
        >>> users.find_by_id("1").name
        'Jane'
    """

    def __init__(self, resource_type: str) -> None:
        self.resource_type = resource_type
        self._items: list[T] = []
        self._index: dict[str, T] = {}
        self._retired_ids: set[str] = set()

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, entity_id: object) -> bool:
        return entity_id in self._index

    def list(self) -> list[T]:
        """Return copies of all entities in insertion order."""
        return [dataclasses.replace(item) for item in self._items]

    def find_by_id(self, entity_id: str) -> T | None:
        """Return a copy of the entity with this id, or None."""
        item = self._index.get(entity_id)
        return dataclasses.replace(item) if item is not None else None

    def filter(self, predicate: Callable[[T], bool]) -> list[T]:
        """Return copies of matching entities in insertion order."""
        return [dataclasses.replace(item) for item in self._items if predicate(item)]

    def any(self, predicate: Callable[[T], bool]) -> bool:
        """Whether any entity matches the predicate."""
        return any(predicate(item) for item in self._items)

    def insert(self, entity: T) -> T:
        """Append an entity to the end of the collection.

        Args:
            entity: Entity with its id already assigned

        Returns:
            Copy of the stored entity

        Raises:
            DuplicateIdError: If the id is live or was used before
        """
        entity_id = entity.id
        if entity_id in self._index or entity_id in self._retired_ids:
            raise DuplicateIdError(f"{self.resource_type} id already used: {entity_id}")

        stored = dataclasses.replace(entity)
        self._items.append(stored)
        self._index[entity_id] = stored
        return dataclasses.replace(stored)

    def update(self, entity_id: str, changes: Mapping[str, Any]) -> T:
        """Assign the given fields in place, leaving all others untouched.

        Args:
            entity_id: Id of the entity to update
            changes: Field name to new value; only these fields change

        Returns:
            Copy of the updated entity

        Raises:
            NotFoundError: If no entity has this id
            ValueError: If changes names an unknown field or `id`
        """
        item = self._index.get(entity_id)
        if item is None:
            raise NotFoundError(self.resource_type, entity_id)

        writable = {f.name for f in dataclasses.fields(item)} - {"id"}
        rejected = sorted(set(changes) - writable)
        if rejected:
            raise ValueError(f"Cannot update {self.resource_type} fields: {rejected}")

        for name, value in changes.items():
            setattr(item, name, value)
        return dataclasses.replace(item)

    def remove_by_id(self, entity_id: str) -> T:
        """Remove an entity by id.

        Returns:
            Copy of the removed entity

        Raises:
            NotFoundError: If no entity has this id
        """
        item = self._index.pop(entity_id, None)
        if item is None:
            raise NotFoundError(self.resource_type, entity_id)

        self._items = [existing for existing in self._items if existing is not item]
        self._retired_ids.add(entity_id)
        return dataclasses.replace(item)

    def remove_where(self, predicate: Callable[[T], bool]) -> list[T]:
        """Remove all matching entities.

        Returns:
            Copies of the removed entities in their former order
        """
        kept: list[T] = []
        removed: list[T] = []
        for item in self._items:
            (removed if predicate(item) else kept).append(item)
        if not removed:
            return []

        self._items = kept
        for item in removed:
            del self._index[item.id]
            self._retired_ids.add(item.id)
        return [dataclasses.replace(item) for item in removed]
