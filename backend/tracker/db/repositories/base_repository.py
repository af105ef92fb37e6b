"""
Base repository class with common CRUD operations.
Repositories flush but never commit; services own the transaction.
"""

from typing import Dict, Generic, Iterable, TypeVar, Type, Optional, List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, delete

from tracker.db.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Base repository for models with an integer `id` primary key."""

    def __init__(self, model: Type[ModelType], session: AsyncSession):
        self.model = model
        self.session = session

    async def create(self, **kwargs) -> ModelType:
        """Insert a row and return it with server defaults loaded."""
        instance = self.model(**kwargs)
        self.session.add(instance)
        await self.session.flush()
        await self.session.refresh(instance)
        return instance

    async def get(self, id: int) -> Optional[ModelType]:
        result = await self.session.execute(
            select(self.model).where(self.model.id == id)
        )
        return result.scalar_one_or_none()

    async def get_many(self, ids: Iterable[int]) -> Dict[int, ModelType]:
        """
        Load several rows in one query.

        Args:
            ids: Record IDs; duplicates are fine

        Returns:
            Mapping of ID to row for the IDs that exist
        """
        wanted = set(ids)
        if not wanted:
            return {}
        result = await self.session.execute(
            select(self.model).where(self.model.id.in_(wanted))
        )
        return {instance.id: instance for instance in result.scalars().all()}

    async def list(
        self,
        skip: int = 0,
        limit: int = 100,
        **filters,
    ) -> List[ModelType]:
        """
        List rows in ID order.

        Args:
            skip: Number of rows to skip
            limit: Maximum number of rows to return
            **filters: Column equality filters; None values and unknown
                columns are ignored
        """
        query = select(self.model)
        for key, value in filters.items():
            if value is not None and hasattr(self.model, key):
                query = query.where(getattr(self.model, key) == value)

        query = query.order_by(self.model.id).offset(skip).limit(limit)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def update(self, id: int, **kwargs) -> Optional[ModelType]:
        """Apply column values and return the refreshed row, or None if it does not exist."""
        if kwargs:
            await self.session.execute(
                update(self.model)
                .where(self.model.id == id)
                .values(**kwargs)
                .execution_options(synchronize_session="fetch")
            )
            await self.session.flush()
        instance = await self.get(id)
        if instance is not None:
            await self.session.refresh(instance)
        return instance

    async def delete(self, id: int) -> bool:
        """Delete a row. Returns False when there was nothing to delete."""
        result = await self.session.execute(
            delete(self.model).where(self.model.id == id)
        )
        await self.session.flush()
        return result.rowcount > 0
