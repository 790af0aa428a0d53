"""
SQLAlchemy implementation of the Repository interface.

Repositories share the request's AsyncSession and never commit: ``put`` and
``delete`` flush so ids and server defaults are available, and the endpoint
commits the whole unit of work.
"""

from typing import Any, Generic, List, Optional, Type, TypeVar

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from sendit.app.domain.repositories import Repository

ModelT = TypeVar("ModelT")


class SqlAlchemyRepository(Repository[ModelT], Generic[ModelT]):
    model: Type[ModelT]

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, entity_id: Any) -> Optional[ModelT]:
        return await self.db.get(self.model, entity_id)

    async def put(self, entity: ModelT) -> ModelT:
        self.db.add(entity)
        await self.db.flush()
        await self.db.refresh(entity)
        return entity

    async def delete(self, entity: ModelT) -> None:
        await self.db.delete(entity)
        await self.db.flush()

    async def list(self, **filters: Any) -> List[ModelT]:
        query = select(self.model).filter_by(**filters).order_by(
            desc(self.model.created_at), desc(self.model.id)
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())
