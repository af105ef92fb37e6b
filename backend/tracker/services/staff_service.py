"""
Staff service with business logic.
"""

from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.services.base_service import BaseService
from tracker.db.repositories.staff_repository import StaffRepository
from tracker.schemas.staff import StaffCreate, StaffUpdate, StaffResponse


class StaffService(BaseService):
    """Service for staff operations."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.staff_repo = StaffRepository(session)

    async def create_staff(self, staff_data: StaffCreate) -> StaffResponse:
        """Create a new staff member."""
        staff = await self.staff_repo.create(**staff_data.model_dump())
        await self.session.commit()
        await self.session.refresh(staff)
        return StaffResponse.model_validate(staff)

    async def get_staff(self, staff_id: int) -> Optional[StaffResponse]:
        """Get staff member by ID."""
        staff = await self.staff_repo.get(staff_id)
        if not staff:
            return None
        return StaffResponse.model_validate(staff)

    async def list_staff(self, include_hidden: bool = False) -> tuple[List[StaffResponse], int]:
        """List staff ordered by name."""
        staff = await self.staff_repo.list_staff(include_hidden=include_hidden)
        return [StaffResponse.model_validate(member) for member in staff], len(staff)

    async def update_staff(self, staff_id: int, staff_data: StaffUpdate) -> Optional[StaffResponse]:
        """Update a staff member."""
        staff = await self.staff_repo.get(staff_id)
        if not staff:
            return None

        update_dict = staff_data.model_dump(exclude_unset=True)
        updated = await self.staff_repo.update(staff_id, **update_dict)
        await self.session.commit()
        await self.session.refresh(updated)
        return StaffResponse.model_validate(updated)

    async def delete_staff(self, staff_id: int) -> bool:
        """Delete a staff member."""
        deleted = await self.staff_repo.delete(staff_id)
        await self.session.commit()
        return deleted
