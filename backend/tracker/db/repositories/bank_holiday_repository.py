"""
Bank holiday repository for database operations.
"""

from datetime import date
from typing import Optional, List, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, and_

from tracker.db.repositories.base_repository import BaseRepository
from tracker.models.bank_holiday import BankHoliday, Region


class BankHolidayRepository(BaseRepository[BankHoliday]):
    """Repository for bank holiday operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(BankHoliday, session)

    async def list_holidays(
        self,
        region: Optional[Region] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> List[BankHoliday]:
        """List holidays filtered by region and inclusive date range."""
        conditions = []
        if region is not None:
            conditions.append(BankHoliday.region == region)
        if start_date is not None:
            conditions.append(BankHoliday.date >= start_date)
        if end_date is not None:
            conditions.append(BankHoliday.date <= end_date)
        query = select(BankHoliday)
        if conditions:
            query = query.where(and_(*conditions))
        result = await self.session.execute(query.order_by(BankHoliday.date, BankHoliday.region))
        return list(result.scalars().all())

    async def list_dates(self, region: Region, start_date: date, end_date: date) -> List[date]:
        """Holiday dates for one region in [start_date, end_date]."""
        result = await self.session.execute(
            select(BankHoliday.date).where(
                and_(
                    BankHoliday.region == region,
                    BankHoliday.date >= start_date,
                    BankHoliday.date <= end_date,
                )
            )
        )
        return list(result.scalars().all())

    async def get_by_date_region(self, day: date, region: Region) -> Optional[BankHoliday]:
        result = await self.session.execute(
            select(BankHoliday).where(
                and_(BankHoliday.date == day, BankHoliday.region == region)
            )
        )
        return result.scalar_one_or_none()

    async def upsert(
        self,
        day: date,
        region: Region,
        title: str,
        notes: Optional[str] = None,
        bunting: bool = False,
        source: str = "manual",
    ) -> Tuple[BankHoliday, bool]:
        """
        Insert or update the holiday keyed on (date, region).

        Returns:
            The row and True when it was created
        """
        existing = await self.get_by_date_region(day, region)
        if existing is None:
            created = await self.create(
                date=day,
                region=region,
                title=title,
                notes=notes,
                bunting=bunting,
                source=source,
            )
            return created, True

        existing.title = title
        existing.notes = notes
        existing.bunting = bunting
        existing.source = source
        await self.session.flush()
        return existing, False
