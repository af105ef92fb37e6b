"""
Daily activity API endpoints.
"""

from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, Query, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.core.events import EventBus
from tracker.db.session import get_db
from tracker.deps.di_container import get_event_bus
from tracker.controllers.activity_controller import ActivityController
from tracker.schemas.activity import ActivityUpsert, ActivityResponse, ActivityListResponse

router = APIRouter()


@router.get("", response_model=ActivityListResponse)
async def list_activities(
    staff_id: Optional[int] = Query(None),
    service_id: Optional[int] = Query(None),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    db: AsyncSession = Depends(get_db),
) -> ActivityListResponse:
    """List activity rows filtered by staff, service and date range."""
    controller = ActivityController(db)
    return await controller.list_activities(
        staff_id=staff_id,
        service_id=service_id,
        start_date=start_date,
        end_date=end_date,
    )


@router.put("", response_model=ActivityResponse)
async def record_activity(
    activity_data: ActivityUpsert,
    db: AsyncSession = Depends(get_db),
    event_bus: EventBus = Depends(get_event_bus),
) -> ActivityResponse:
    """Record a day's delivered count, replacing any earlier value."""
    controller = ActivityController(db, event_bus)
    return await controller.record_activity(activity_data)


@router.delete("/{activity_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_activity(
    activity_id: int,
    db: AsyncSession = Depends(get_db),
    event_bus: EventBus = Depends(get_event_bus),
):
    """Delete an activity row."""
    controller = ActivityController(db, event_bus)
    deleted = await controller.delete_activity(activity_id)
    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Activity not found",
        )
