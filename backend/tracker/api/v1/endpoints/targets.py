"""
Monthly target API endpoints.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.core.events import EventBus
from tracker.db.session import get_db
from tracker.deps.di_container import get_event_bus
from tracker.controllers.target_controller import TargetController
from tracker.schemas.target import MonthlyTargetsSave, MonthlyTargetsResponse

router = APIRouter()


@router.get("/monthly", response_model=MonthlyTargetsResponse)
async def load_targets(
    month: int = Query(..., ge=1, le=12),
    financial_year_start: int = Query(..., ge=2000, le=2100),
    staff_id: Optional[int] = Query(None),
    db: AsyncSession = Depends(get_db),
) -> MonthlyTargetsResponse:
    """Targets for a financial-year month, for one staff member or the team."""
    controller = TargetController(db)
    return await controller.load_targets(month, financial_year_start, staff_id)


@router.put("/monthly", response_model=MonthlyTargetsResponse)
async def save_targets(
    targets_data: MonthlyTargetsSave,
    db: AsyncSession = Depends(get_db),
    event_bus: EventBus = Depends(get_event_bus),
) -> MonthlyTargetsResponse:
    """Replace a staff member's targets for a month."""
    controller = TargetController(db, event_bus)
    return await controller.save_targets(targets_data)
