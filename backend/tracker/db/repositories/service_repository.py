"""
Service repository for database operations.
"""

from typing import Optional, List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func

from tracker.db.repositories.base_repository import BaseRepository
from tracker.models.service import Service


class ServiceRepository(BaseRepository[Service]):
    """Repository for service operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(Service, session)

    async def list_services(self) -> List[Service]:
        """List services ordered by ID."""
        result = await self.session.execute(select(Service).order_by(Service.id))
        return list(result.scalars().all())

    async def get_by_name(self, service_name: str) -> Optional[Service]:
        """Get a service by name, case-insensitively."""
        result = await self.session.execute(
            select(Service).where(func.lower(Service.service_name) == service_name.lower())
        )
        return result.scalars().first()
