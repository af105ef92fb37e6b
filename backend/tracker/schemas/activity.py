"""
Daily activity Pydantic schemas for request/response validation.
"""

from datetime import date
from pydantic import BaseModel, Field
from typing import List


class ActivityUpsert(BaseModel):
    """Schema for recording a day's delivered count for one service."""
    staff_id: int
    service_id: int
    date: date
    delivered_count: int = Field(..., ge=0)


class ActivityResponse(BaseModel):
    """Schema for activity response."""
    id: int
    staff_id: int
    service_id: int
    date: date
    day: int
    month: int
    year: int
    delivered_count: int

    class Config:
        from_attributes = True


class ActivityListResponse(BaseModel):
    """Schema for activity list response."""
    items: List[ActivityResponse]
    total: int
    total_delivered: int
