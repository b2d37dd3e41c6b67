"""
Base repository interface.

Engine services talk to storage only through this interface, so the
in-memory implementation can be swapped for a database-backed one without
touching engine logic.
"""
from abc import ABC, abstractmethod
from typing import Callable, Generic, Optional, TypeVar

from pydantic import BaseModel

# Type variable for generic repository
ModelType = TypeVar("ModelType", bound=BaseModel)

Predicate = Callable[[ModelType], bool]


class Repository(ABC, Generic[ModelType]):
    """
    Storage for one entity type keyed by its ``id`` attribute.

    Usage:
        class ListingRepository(InMemoryRepository[Listing]):
            async def find_by_design(self, design_id: str) -> list[Listing]:
                return await self.list_by(lambda l: l.design_id == design_id)
    """

    @abstractmethod
    async def get(self, id: str) -> Optional[ModelType]:
        """
        Get a single entity by id.

        Returns:
            Entity snapshot or None if not found
        """

    @abstractmethod
    async def put(self, entity: ModelType) -> ModelType:
        """Insert or replace the entity stored under ``entity.id``."""

    @abstractmethod
    async def list_by(
        self,
        predicate: Optional[Predicate] = None,
    ) -> list[ModelType]:
        """
        List entities matching ``predicate`` in insertion order.

        Args:
            predicate: Filter callable; all entities when None
        """

    async def count(self, predicate: Optional[Predicate] = None) -> int:
        return len(await self.list_by(predicate))

    async def exists(self, id: str) -> bool:
        return await self.get(id) is not None

    async def find_one_by(self, predicate: Predicate) -> Optional[ModelType]:
        """First entity matching ``predicate`` or None."""
        matches = await self.list_by(predicate)
        return matches[0] if matches else None
