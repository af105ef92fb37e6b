"""
Working days API endpoint.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.core.clock import Clock
from tracker.db.session import get_db
from tracker.deps.di_container import get_clock
from tracker.controllers.working_days_controller import WorkingDaysController
from tracker.schemas.working_days import WorkingDayQuery, WorkingDaysResult

router = APIRouter()


@router.get("", response_model=WorkingDaysResult)
async def get_working_days(
    financial_year_start: int = Query(..., ge=2000, le=2100),
    month: int = Query(..., ge=1, le=12),
    staff_id: Optional[int] = Query(None),
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> WorkingDaysResult:
    """Working days for a month, net of bank holidays and, for a staff member, their leave."""
    controller = WorkingDaysController(db, clock)
    query = WorkingDayQuery(financial_year_start=financial_year_start, month=month, staff_id=staff_id)
    return await controller.get_working_days(query)
