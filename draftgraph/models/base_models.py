"""
Shared entity base and keyed collections.

DraftEntity gives every model of the draft graph an immutable identifier,
deep cloning and a JSON-ready dump. Repository is the ordered, keyed,
insert-or-replace collection the document uses for its tracks.
"""

from __future__ import annotations

from typing import Any, Generic, Iterator, TypeVar
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from draftgraph.exceptions import RepositoryKeyConflictError


def new_entity_id() -> str:
    """Generate a fresh entity identifier."""
    return str(uuid4())


EntityT = TypeVar("EntityT", bound="DraftEntity")


class DraftEntity(BaseModel):
    """
    Base class for every identifiable model in the draft graph.

    The identifier is assigned at construction and cannot be reassigned.
    Clones keep it unless a new one is explicitly requested, which is what
    lets Repository.upsert treat a modified clone as a replacement.
    """
    model_config = ConfigDict(validate_assignment=True)

    id: str = Field(
        default_factory=new_entity_id,
        frozen=True,
        description="Unique, immutable identifier",
    )

    def clone(self: EntityT, new_id: bool = False) -> EntityT:
        """Return a deep, independent copy of this entity."""
        if new_id:
            return self.model_copy(update={"id": new_entity_id()}, deep=True)
        return self.model_copy(deep=True)

    def to_serializable(self) -> dict[str, Any]:
        """Return the full field set, id included, ready for json.dumps."""
        return self.model_dump(mode="json")


class Repository(Generic[EntityT]):
    """
    Ordered keyed collection of entities.

    New keys are appended; existing keys are replaced in place. Lookups and
    removals never raise, absence is reported as None.
    """

    def __init__(self, items: list[EntityT] | None = None):
        self._items: dict[str, EntityT] = {}
        for item in items or []:
            self.upsert(item)

    def get_all(self) -> list[EntityT]:
        return list(self._items.values())

    def get_by_id(self, entity_id: str) -> EntityT | None:
        return self._items.get(entity_id)

    def upsert(self, item: EntityT) -> EntityT:
        # dict assignment keeps the original position of an existing key
        self._items[item.id] = item
        return item

    def remove_by_id(self, entity_id: str) -> EntityT | None:
        return self._items.pop(entity_id, None)

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, entity_id: object) -> bool:
        return entity_id in self._items

    def __iter__(self) -> Iterator[EntityT]:
        return iter(self.get_all())


class StrictRepository(Repository[EntityT]):
    """Repository variant that refuses to silently replace entries."""

    def __init__(self, items: list[EntityT] | None = None):
        super().__init__()
        for item in items or []:
            self.insert(item)

    def insert(self, item: EntityT) -> EntityT:
        if item.id in self._items:
            raise RepositoryKeyConflictError(item.id)
        return self.upsert(item)
