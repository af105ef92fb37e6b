"""
Staff repository for database operations.
"""

from typing import Optional, List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from tracker.db.repositories.base_repository import BaseRepository
from tracker.models.bank_holiday import Region
from tracker.models.staff import Staff


class StaffRepository(BaseRepository[Staff]):
    """Repository for staff operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(Staff, session)

    async def list_staff(self, include_hidden: bool = False) -> List[Staff]:
        """List staff ordered by name."""
        query = select(Staff)
        if not include_hidden:
            query = query.where(Staff.is_hidden.is_(False))
        query = query.order_by(Staff.name)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def get_home_region(self, staff_id: int) -> Optional[Region]:
        """Home region of a staff member, None when unset or unknown."""
        result = await self.session.execute(
            select(Staff.home_region).where(Staff.id == staff_id)
        )
        return result.scalar_one_or_none()
