"""
Keyed + ordered entity container.

Entities[T] pairs a dict (id -> entity) with an explicit list of ids so that
lookups stay O(1) while iteration follows insertion order.

Invariant: set(ids) == set(entities) and ids holds no duplicates.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from typing import Generic, TypeVar

T = TypeVar("T")


class Entities(Generic[T]):
    """Mapping from id to entity with a deterministic id order."""

    def __init__(self, key: Callable[[T], str]):
        self._key = key
        self._ids: list[str] = []
        self._entities: dict[str, T] = {}

    @classmethod
    def from_iterable(cls, items: Iterable[T], key: Callable[[T], str]) -> Entities[T]:
        """Build a store from items, rejecting duplicate ids."""
        store: Entities[T] = cls(key)
        for item in items:
            store.add(item)
        return store

    @property
    def ids(self) -> list[str]:
        """Ids in insertion order (a copy)."""
        return list(self._ids)

    @property
    def entities(self) -> dict[str, T]:
        """Id -> entity mapping (a copy)."""
        return dict(self._entities)

    def add(self, item: T) -> T:
        """Insert a new entity. Raises KeyError if its id is already present."""
        item_id = self._key(item)
        if item_id in self._entities:
            raise KeyError(f"Duplicate entity id: {item_id!r}")
        self._ids.append(item_id)
        self._entities[item_id] = item
        return item

    def update(self, item: T) -> T:
        """Replace an existing entity in place, keeping its position."""
        item_id = self._key(item)
        if item_id not in self._entities:
            raise KeyError(f"Unknown entity id: {item_id!r}")
        self._entities[item_id] = item
        return item

    def upsert(self, item: T) -> T:
        """Update if present, otherwise append."""
        if self._key(item) in self._entities:
            return self.update(item)
        return self.add(item)

    def remove(self, item_id: str) -> T:
        """Remove and return the entity with this id."""
        item = self._entities.pop(item_id)
        self._ids.remove(item_id)
        return item

    def get(self, item_id: str) -> T | None:
        return self._entities.get(item_id)

    def __getitem__(self, item_id: str) -> T:
        return self._entities[item_id]

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._entities

    def __len__(self) -> int:
        return len(self._ids)

    def __iter__(self) -> Iterator[T]:
        """Iterate entities in id order."""
        for item_id in self._ids:
            yield self._entities[item_id]

    def __repr__(self) -> str:
        return f"Entities({len(self)} items)"
