"""
Daily activity repository for database operations.
"""

from datetime import date
from typing import Optional, List, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, and_, func

from tracker.db.repositories.base_repository import BaseRepository
from tracker.models.activity import DailyActivity


class ActivityRepository(BaseRepository[DailyActivity]):
    """Repository for daily activity operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(DailyActivity, session)

    def _filtered(
        self,
        query,
        staff_id: Optional[int] = None,
        service_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ):
        conditions = []
        if staff_id is not None:
            conditions.append(DailyActivity.staff_id == staff_id)
        if service_id is not None:
            conditions.append(DailyActivity.service_id == service_id)
        if start_date is not None:
            conditions.append(DailyActivity.date >= start_date)
        if end_date is not None:
            conditions.append(DailyActivity.date <= end_date)
        if conditions:
            query = query.where(and_(*conditions))
        return query

    async def list_activities(
        self,
        staff_id: Optional[int] = None,
        service_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> List[DailyActivity]:
        """List activity rows filtered by staff, service and inclusive date range."""
        query = self._filtered(
            select(DailyActivity), staff_id, service_id, start_date, end_date
        ).order_by(DailyActivity.date, DailyActivity.staff_id, DailyActivity.service_id)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def sum_delivered(
        self,
        staff_id: Optional[int] = None,
        service_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> int:
        """Total delivered count for the filters."""
        query = self._filtered(
            select(func.coalesce(func.sum(DailyActivity.delivered_count), 0)),
            staff_id, service_id, start_date, end_date,
        )
        result = await self.session.execute(query)
        return int(result.scalar_one())

    async def get_entry(self, staff_id: int, service_id: int, day: date) -> Optional[DailyActivity]:
        """Get the activity row for a staff member, service and date."""
        result = await self.session.execute(
            select(DailyActivity).where(
                and_(
                    DailyActivity.staff_id == staff_id,
                    DailyActivity.service_id == service_id,
                    DailyActivity.date == day,
                )
            )
        )
        return result.scalar_one_or_none()

    async def upsert(self, staff_id: int, service_id: int, day: date, delivered_count: int) -> Tuple[DailyActivity, bool]:
        """
        Insert or update the row for (staff, service, date).

        Returns:
            The row and True when it was created
        """
        existing = await self.get_entry(staff_id, service_id, day)
        if existing is None:
            created = await self.create(
                staff_id=staff_id,
                service_id=service_id,
                date=day,
                day=day.day,
                month=day.month,
                year=day.year,
                delivered_count=delivered_count,
            )
            return created, True

        existing.delivered_count = delivered_count
        await self.session.flush()
        return existing, False
