"""
Staff controller.
"""

from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.controllers.base_controller import BaseController
from tracker.services.staff_service import StaffService
from tracker.schemas.staff import StaffCreate, StaffUpdate, StaffResponse, StaffListResponse


class StaffController(BaseController):
    """Controller for staff operations."""

    def __init__(self, session: AsyncSession):
        self.staff_service = StaffService(session)

    async def create_staff(self, staff_data: StaffCreate) -> StaffResponse:
        """Create a new staff member."""
        return await self.staff_service.create_staff(staff_data)

    async def get_staff(self, staff_id: int) -> Optional[StaffResponse]:
        """Get staff member by ID."""
        return await self.staff_service.get_staff(staff_id)

    async def list_staff(self, include_hidden: bool = False) -> StaffListResponse:
        """List staff, hidden members only when asked."""
        staff, total = await self.staff_service.list_staff(include_hidden=include_hidden)
        return StaffListResponse(items=staff, total=total)

    async def update_staff(self, staff_id: int, staff_data: StaffUpdate) -> Optional[StaffResponse]:
        """Update a staff member."""
        return await self.staff_service.update_staff(staff_id, staff_data)

    async def delete_staff(self, staff_id: int) -> bool:
        """Delete a staff member."""
        return await self.staff_service.delete_staff(staff_id)
