"""
Staff leave controller.
"""

from datetime import date
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.controllers.base_controller import BaseController
from tracker.core.events import EventBus
from tracker.services.leave_service import LeaveService
from tracker.schemas.leave import LeaveCreate, LeaveUpdate, LeaveResponse, LeaveListResponse


class LeaveController(BaseController):
    """Controller for staff leave operations."""

    def __init__(self, session: AsyncSession, event_bus: Optional[EventBus] = None):
        self.leave_service = LeaveService(session, event_bus)

    async def create_leave(self, leave_data: LeaveCreate) -> LeaveResponse:
        """Create a leave range."""
        return await self.leave_service.create_leave(leave_data)

    async def get_leave(self, leave_id: int) -> Optional[LeaveResponse]:
        return await self.leave_service.get_leave(leave_id)

    async def list_leave(
        self,
        staff_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> LeaveListResponse:
        """List leave with optional filters."""
        leave, total = await self.leave_service.list_leave(staff_id, start_date, end_date)
        return LeaveListResponse(items=leave, total=total)

    async def update_leave(self, leave_id: int, leave_data: LeaveUpdate) -> Optional[LeaveResponse]:
        """Update a leave range."""
        return await self.leave_service.update_leave(leave_id, leave_data)

    async def delete_leave(self, leave_id: int) -> bool:
        return await self.leave_service.delete_leave(leave_id)
