"""
Staff leave Pydantic schemas for request/response validation.
"""

from datetime import date
from pydantic import BaseModel, Field, model_validator
from typing import Optional, List


class LeaveBase(BaseModel):
    """Base leave schema with common fields."""
    staff_id: int
    start_date: date
    end_date: date
    type: str = Field("annual", max_length=50)
    notes: Optional[str] = Field(None, max_length=500)


class LeaveCreate(LeaveBase):
    """Schema for creating a leave range."""

    @model_validator(mode="after")
    def check_range(self):
        if self.end_date < self.start_date:
            raise ValueError("end_date must be on or after start_date")
        return self


class LeaveUpdate(BaseModel):
    """Schema for updating a leave range (all fields optional)."""
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    type: Optional[str] = Field(None, max_length=50)
    notes: Optional[str] = Field(None, max_length=500)


class LeaveResponse(LeaveBase):
    """Schema for leave response."""
    id: int

    class Config:
        from_attributes = True


class LeaveListResponse(BaseModel):
    """Schema for leave list response."""
    items: List[LeaveResponse]
    total: int
