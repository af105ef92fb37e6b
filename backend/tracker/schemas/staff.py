"""
Staff Pydantic schemas for request/response validation.
"""

from pydantic import BaseModel, Field
from typing import Optional, List

from tracker.models.bank_holiday import Region


class StaffBase(BaseModel):
    """Base staff schema with common fields."""
    name: str = Field(..., min_length=1, max_length=255)
    role: str = Field("staff", max_length=50)
    home_region: Optional[Region] = None
    is_hidden: bool = False


class StaffCreate(StaffBase):
    """Schema for creating a staff member."""
    pass


class StaffUpdate(BaseModel):
    """Schema for updating a staff member (all fields optional)."""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    role: Optional[str] = Field(None, max_length=50)
    home_region: Optional[Region] = None
    is_hidden: Optional[bool] = None


class StaffResponse(StaffBase):
    """Schema for staff response."""
    id: int

    class Config:
        from_attributes = True


class StaffListResponse(BaseModel):
    """Schema for staff list response."""
    items: List[StaffResponse]
    total: int
