"""
Staff API endpoints.
"""

from fastapi import APIRouter, Depends, Query, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.db.session import get_db
from tracker.controllers.staff_controller import StaffController
from tracker.schemas.staff import (
    StaffCreate,
    StaffUpdate,
    StaffResponse,
    StaffListResponse,
)

router = APIRouter()


@router.post("", response_model=StaffResponse, status_code=status.HTTP_201_CREATED)
async def create_staff(
    staff_data: StaffCreate,
    db: AsyncSession = Depends(get_db),
) -> StaffResponse:
    """Create a new staff member."""
    controller = StaffController(db)
    return await controller.create_staff(staff_data)


@router.get("", response_model=StaffListResponse)
async def list_staff(
    include_hidden: bool = Query(False),
    db: AsyncSession = Depends(get_db),
) -> StaffListResponse:
    """List staff members."""
    controller = StaffController(db)
    return await controller.list_staff(include_hidden=include_hidden)


@router.get("/{staff_id}", response_model=StaffResponse)
async def get_staff(
    staff_id: int,
    db: AsyncSession = Depends(get_db),
) -> StaffResponse:
    """Get staff member by ID."""
    controller = StaffController(db)
    staff = await controller.get_staff(staff_id)
    if not staff:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Staff member not found",
        )
    return staff


@router.put("/{staff_id}", response_model=StaffResponse)
async def update_staff(
    staff_id: int,
    staff_data: StaffUpdate,
    db: AsyncSession = Depends(get_db),
) -> StaffResponse:
    """Update a staff member."""
    controller = StaffController(db)
    staff = await controller.update_staff(staff_id, staff_data)
    if not staff:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Staff member not found",
        )
    return staff


@router.delete("/{staff_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_staff(
    staff_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Delete a staff member."""
    controller = StaffController(db)
    deleted = await controller.delete_staff(staff_id)
    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Staff member not found",
        )
