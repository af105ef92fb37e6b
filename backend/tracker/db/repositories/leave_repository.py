"""
Staff leave repository for database operations.
"""

from datetime import date
from typing import Optional, List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, and_

from tracker.db.repositories.base_repository import BaseRepository
from tracker.models.leave import StaffLeave


class LeaveRepository(BaseRepository[StaffLeave]):
    """Repository for staff leave operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(StaffLeave, session)

    async def list_overlapping(
        self,
        start_date: date,
        end_date: date,
        staff_id: Optional[int] = None,
    ) -> List[StaffLeave]:
        """Leave ranges that intersect [start_date, end_date]."""
        query = select(StaffLeave).where(
            and_(
                StaffLeave.start_date <= end_date,
                StaffLeave.end_date >= start_date,
            )
        )
        if staff_id is not None:
            query = query.where(StaffLeave.staff_id == staff_id)
        result = await self.session.execute(query.order_by(StaffLeave.start_date, StaffLeave.id))
        return list(result.scalars().all())

    async def list_for_staff(self, staff_id: int) -> List[StaffLeave]:
        result = await self.session.execute(
            select(StaffLeave).where(StaffLeave.staff_id == staff_id).order_by(StaffLeave.start_date)
        )
        return list(result.scalars().all())
