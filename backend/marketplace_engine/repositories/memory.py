"""
In-memory repository.

Entities are copied on the way in and on the way out, so a caller holding
a snapshot never sees a later write half-applied and cannot mutate stored
state without going through ``put``.
"""
from typing import Generic, Optional

from marketplace_engine.repositories.base import ModelType, Predicate, Repository


class InMemoryRepository(Repository[ModelType], Generic[ModelType]):
    """Dictionary-backed repository; one instance per entity type."""

    def __init__(self):
        self._items: dict[str, ModelType] = {}

    async def get(self, id: str) -> Optional[ModelType]:
        item = self._items.get(id)
        return item.model_copy(deep=True) if item is not None else None

    async def put(self, entity: ModelType) -> ModelType:
        self._items[entity.id] = entity.model_copy(deep=True)
        return entity

    async def list_by(
        self,
        predicate: Optional[Predicate] = None,
    ) -> list[ModelType]:
        return [
            item.model_copy(deep=True)
            for item in self._items.values()
            if predicate is None or predicate(item)
        ]

    def __len__(self) -> int:
        return len(self._items)
