"""
Storage interfaces used by the order rules and the API layer.

The order rules only ever see these abstractions; production wires the
SQLAlchemy implementations from sendit.app.repositories, tests use an
in-memory fake.
"""

from abc import ABC, abstractmethod
from typing import Any, Generic, List, Optional, TypeVar

ModelT = TypeVar("ModelT")


class Repository(ABC, Generic[ModelT]):

    @abstractmethod
    async def get(self, entity_id: Any) -> Optional[ModelT]:
        ...

    @abstractmethod
    async def put(self, entity: ModelT) -> ModelT:
        """Insert or update ``entity`` and return it with its id assigned."""

    @abstractmethod
    async def delete(self, entity: ModelT) -> None:
        ...

    @abstractmethod
    async def list(self, **filters: Any) -> List[ModelT]:
        """Entities whose attributes equal every keyword filter, newest first."""


class ParcelLookup(ABC):

    @abstractmethod
    async def get_by_id(self, parcel_id: Any):
        """Return the parcel or None."""
