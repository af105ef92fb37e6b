"""
Staff leave API endpoints.
"""

from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, Query, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.core.events import EventBus
from tracker.db.session import get_db
from tracker.deps.di_container import get_event_bus
from tracker.controllers.leave_controller import LeaveController
from tracker.schemas.leave import LeaveCreate, LeaveUpdate, LeaveResponse, LeaveListResponse

router = APIRouter()


@router.post("", response_model=LeaveResponse, status_code=status.HTTP_201_CREATED)
async def create_leave(
    leave_data: LeaveCreate,
    db: AsyncSession = Depends(get_db),
    event_bus: EventBus = Depends(get_event_bus),
) -> LeaveResponse:
    """Book leave for a staff member."""
    controller = LeaveController(db, event_bus)
    return await controller.create_leave(leave_data)


@router.get("", response_model=LeaveListResponse)
async def list_leave(
    staff_id: Optional[int] = Query(None),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    db: AsyncSession = Depends(get_db),
) -> LeaveListResponse:
    """List leave, optionally for one staff member and overlapping a date range."""
    controller = LeaveController(db)
    return await controller.list_leave(staff_id, start_date, end_date)


@router.get("/{leave_id}", response_model=LeaveResponse)
async def get_leave(
    leave_id: int,
    db: AsyncSession = Depends(get_db),
) -> LeaveResponse:
    """Get leave by ID."""
    controller = LeaveController(db)
    leave = await controller.get_leave(leave_id)
    if not leave:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Leave not found",
        )
    return leave


@router.put("/{leave_id}", response_model=LeaveResponse)
async def update_leave(
    leave_id: int,
    leave_data: LeaveUpdate,
    db: AsyncSession = Depends(get_db),
    event_bus: EventBus = Depends(get_event_bus),
) -> LeaveResponse:
    """Update a leave range."""
    controller = LeaveController(db, event_bus)
    leave = await controller.update_leave(leave_id, leave_data)
    if not leave:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Leave not found",
        )
    return leave


@router.delete("/{leave_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_leave(
    leave_id: int,
    db: AsyncSession = Depends(get_db),
    event_bus: EventBus = Depends(get_event_bus),
):
    """Delete a leave range."""
    controller = LeaveController(db, event_bus)
    deleted = await controller.delete_leave(leave_id)
    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Leave not found",
        )
