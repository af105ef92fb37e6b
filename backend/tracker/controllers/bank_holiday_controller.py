"""
Bank holiday controller.
Coordinates manual maintenance and the feed sync.
"""

from datetime import date
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.controllers.base_controller import BaseController
from tracker.core.clock import Clock
from tracker.core.events import EventBus
from tracker.core.integrations.bank_holiday_feed import BankHolidayFeedClient
from tracker.models.bank_holiday import Region
from tracker.services.bank_holiday_service import BankHolidayService
from tracker.services.bank_holiday_sync_service import BankHolidaySyncService
from tracker.schemas.bank_holiday import (
    BankHolidayCreate,
    BankHolidayResponse,
    BankHolidayListResponse,
    BankHolidaySyncResponse,
)


class BankHolidayController(BaseController):
    """Controller for bank holiday operations."""

    def __init__(self, session: AsyncSession, event_bus: Optional[EventBus] = None):
        self.session = session
        self.event_bus = event_bus
        self.bank_holiday_service = BankHolidayService(session)

    async def list_holidays(
        self,
        region: Optional[Region] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> BankHolidayListResponse:
        """List holidays with optional filters."""
        holidays, total = await self.bank_holiday_service.list_holidays(region, start_date, end_date)
        return BankHolidayListResponse(items=holidays, total=total)

    async def create_holiday(self, holiday_data: BankHolidayCreate) -> BankHolidayResponse:
        return await self.bank_holiday_service.create_holiday(holiday_data)

    async def delete_holiday(self, holiday_id: int) -> bool:
        return await self.bank_holiday_service.delete_holiday(holiday_id)

    async def sync(self, feed: BankHolidayFeedClient, clock: Clock, force: bool = False) -> BankHolidaySyncResponse:
        """Import the feed when due, or always when forced."""
        sync_service = BankHolidaySyncService(self.session, feed, clock, self.event_bus)
        return await sync_service.sync(force=force)
