"""
Bank holiday service: lookups and manual maintenance.
"""

from datetime import date
from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.core.exceptions import InvalidInputError
from tracker.services.base_service import BaseService
from tracker.db.repositories.bank_holiday_repository import BankHolidayRepository
from tracker.models.bank_holiday import Region
from tracker.schemas.bank_holiday import BankHolidayCreate, BankHolidayResponse


class BankHolidayService(BaseService):
    """Service for bank holiday operations."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.holiday_repo = BankHolidayRepository(session)

    async def list_holidays(
        self,
        region: Optional[Region] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> tuple[List[BankHolidayResponse], int]:
        """List holidays filtered by region and date range."""
        if start_date and end_date and end_date < start_date:
            raise InvalidInputError("end_date must be on or after start_date")
        holidays = await self.holiday_repo.list_holidays(region, start_date, end_date)
        return [BankHolidayResponse.model_validate(holiday) for holiday in holidays], len(holidays)

    async def create_holiday(self, holiday_data: BankHolidayCreate) -> BankHolidayResponse:
        """Add or replace a holiday for (date, region)."""
        holiday, _ = await self.holiday_repo.upsert(
            day=holiday_data.date,
            region=holiday_data.region,
            title=holiday_data.title,
            notes=holiday_data.notes,
            bunting=holiday_data.bunting,
            source="manual",
        )
        await self.session.commit()
        await self.session.refresh(holiday)
        return BankHolidayResponse.model_validate(holiday)

    async def delete_holiday(self, holiday_id: int) -> bool:
        deleted = await self.holiday_repo.delete(holiday_id)
        await self.session.commit()
        return deleted
