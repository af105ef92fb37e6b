"""
Staff leave service with business logic.
"""

from datetime import date
from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.core.events import LEAVE_CHANGED, EventBus
from tracker.core.exceptions import InvalidInputError, NotFoundError
from tracker.services.base_service import BaseService
from tracker.db.repositories.leave_repository import LeaveRepository
from tracker.db.repositories.staff_repository import StaffRepository
from tracker.schemas.leave import LeaveCreate, LeaveUpdate, LeaveResponse


class LeaveService(BaseService):
    """Service for staff leave operations."""

    def __init__(self, session: AsyncSession, event_bus: Optional[EventBus] = None):
        self.session = session
        self.event_bus = event_bus
        self.leave_repo = LeaveRepository(session)
        self.staff_repo = StaffRepository(session)

    async def create_leave(self, leave_data: LeaveCreate) -> LeaveResponse:
        """Create a leave range for a staff member."""
        if await self.staff_repo.get(leave_data.staff_id) is None:
            raise NotFoundError("Staff member not found", details={"staff_id": leave_data.staff_id})

        leave = await self.leave_repo.create(**leave_data.model_dump())
        await self.session.commit()
        await self.session.refresh(leave)
        await self.publish(LEAVE_CHANGED, staff_id=leave.staff_id, leave_id=leave.id)
        return LeaveResponse.model_validate(leave)

    async def get_leave(self, leave_id: int) -> Optional[LeaveResponse]:
        leave = await self.leave_repo.get(leave_id)
        if not leave:
            return None
        return LeaveResponse.model_validate(leave)

    async def list_leave(
        self,
        staff_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> tuple[List[LeaveResponse], int]:
        """List leave, optionally for one staff member and overlapping a date range."""
        if start_date is not None or end_date is not None:
            leave = await self.leave_repo.list_overlapping(
                start_date or date.min,
                end_date or date.max,
                staff_id=staff_id,
            )
        elif staff_id is not None:
            leave = await self.leave_repo.list_for_staff(staff_id)
        else:
            leave = await self.leave_repo.list(limit=1000)
        return [LeaveResponse.model_validate(item) for item in leave], len(leave)

    async def update_leave(self, leave_id: int, leave_data: LeaveUpdate) -> Optional[LeaveResponse]:
        """Update a leave range; the result must still end on or after it starts."""
        leave = await self.leave_repo.get(leave_id)
        if not leave:
            return None

        update_dict = leave_data.model_dump(exclude_unset=True)
        start_date = update_dict.get("start_date", leave.start_date)
        end_date = update_dict.get("end_date", leave.end_date)
        if end_date < start_date:
            raise InvalidInputError("end_date must be on or after start_date")

        updated = await self.leave_repo.update(leave_id, **update_dict)
        await self.session.commit()
        await self.session.refresh(updated)
        await self.publish(LEAVE_CHANGED, staff_id=updated.staff_id, leave_id=leave_id)
        return LeaveResponse.model_validate(updated)

    async def delete_leave(self, leave_id: int) -> bool:
        leave = await self.leave_repo.get(leave_id)
        if leave is None:
            return False
        staff_id = leave.staff_id
        await self.leave_repo.delete(leave_id)
        await self.session.commit()
        await self.publish(LEAVE_CHANGED, staff_id=staff_id, leave_id=leave_id)
        return True
