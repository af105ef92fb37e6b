"""
Bank holiday API endpoints.
"""

from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, Query, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.core.clock import Clock
from tracker.core.config import settings
from tracker.core.events import EventBus
from tracker.core.integrations.bank_holiday_feed import BankHolidayFeedClient
from tracker.core.rate_limit import limiter
from tracker.db.session import get_db
from tracker.deps.di_container import get_bank_holiday_feed, get_clock, get_event_bus
from tracker.controllers.bank_holiday_controller import BankHolidayController
from tracker.models.bank_holiday import Region
from tracker.schemas.bank_holiday import (
    BankHolidayCreate,
    BankHolidayResponse,
    BankHolidayListResponse,
    BankHolidaySyncResponse,
)

router = APIRouter()


@router.get("", response_model=BankHolidayListResponse)
async def list_holidays(
    region: Optional[Region] = Query(None),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    db: AsyncSession = Depends(get_db),
) -> BankHolidayListResponse:
    """List bank holidays by region and date range."""
    controller = BankHolidayController(db)
    return await controller.list_holidays(region, start_date, end_date)


@router.post("", response_model=BankHolidayResponse, status_code=status.HTTP_201_CREATED)
async def create_holiday(
    holiday_data: BankHolidayCreate,
    db: AsyncSession = Depends(get_db),
) -> BankHolidayResponse:
    """Add a bank holiday by hand."""
    controller = BankHolidayController(db)
    return await controller.create_holiday(holiday_data)


@router.post("/sync", response_model=BankHolidaySyncResponse)
@limiter.limit(f"{settings.RATE_LIMIT_PER_MINUTE}/minute")
async def sync_holidays(
    request: Request,
    force: bool = Query(False),
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
    feed: BankHolidayFeedClient = Depends(get_bank_holiday_feed),
    event_bus: EventBus = Depends(get_event_bus),
) -> BankHolidaySyncResponse:
    """Import the national bank holiday feed if it has not been imported this month."""
    controller = BankHolidayController(db, event_bus)
    return await controller.sync(feed, clock, force=force)


@router.delete("/{holiday_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_holiday(
    holiday_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Delete a bank holiday."""
    controller = BankHolidayController(db)
    deleted = await controller.delete_holiday(holiday_id)
    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Bank holiday not found",
        )
