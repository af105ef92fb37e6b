"""
Working days Pydantic schemas.
"""

from pydantic import BaseModel, Field
from typing import Optional

from tracker.models.bank_holiday import Region


class WorkingDayQuery(BaseModel):
    """A month addressed by financial year, optionally for one staff member."""
    financial_year_start: int = Field(..., ge=2000, le=2100)
    month: int = Field(..., ge=1, le=12)
    staff_id: Optional[int] = None

    @property
    def financial_year_end(self) -> int:
        return self.financial_year_start + 1


class WorkingDaysResult(BaseModel):
    """Working days for a month and how many have elapsed."""
    year: int
    month: int
    region: Region
    team_working_days: int
    staff_working_days: int
    working_days_up_to_today: int
    fallback: bool = False
