"""
Bank holiday Pydantic schemas for request/response validation.
"""

from datetime import date, datetime
from pydantic import BaseModel, Field
from typing import Optional, List

from tracker.models.bank_holiday import Region


class BankHolidayBase(BaseModel):
    """Base bank holiday schema with common fields."""
    date: date
    region: Region
    title: str = Field(..., min_length=1, max_length=255)
    notes: Optional[str] = Field(None, max_length=500)
    bunting: bool = False


class BankHolidayCreate(BankHolidayBase):
    """Schema for adding a holiday by hand."""
    pass


class BankHolidayResponse(BankHolidayBase):
    """Schema for bank holiday response."""
    id: int
    source: str

    class Config:
        from_attributes = True


class BankHolidayListResponse(BaseModel):
    """Schema for bank holiday list response."""
    items: List[BankHolidayResponse]
    total: int


class BankHolidaySyncResponse(BaseModel):
    """Outcome of a bank holiday feed sync."""
    synced: bool
    created: int = 0
    updated: int = 0
    last_synced_at: Optional[datetime] = None
    message: str
