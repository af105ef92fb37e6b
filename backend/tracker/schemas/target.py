"""
Target Pydantic schemas: monthly targets, annual Self Assessment targets,
distribution rules and allocations.
"""

from datetime import datetime
from pydantic import BaseModel, Field, field_validator
from typing import Dict, List, Optional


class ServiceTargetValue(BaseModel):
    """Target for one service."""
    service_id: int
    target_value: int = Field(..., ge=0)


class MonthlyTargetsSave(BaseModel):
    """Replace a staff member's targets for one financial-year month."""
    staff_id: int
    month: int = Field(..., ge=1, le=12)
    financial_year_start: int = Field(..., ge=2000, le=2100)
    targets: List[ServiceTargetValue]


class MonthlyTargetResponse(BaseModel):
    """Schema for a stored monthly target row."""
    id: int
    staff_id: int
    service_id: int
    month: int
    year: int
    target_value: int

    class Config:
        from_attributes = True


class MonthlyTargetsResponse(BaseModel):
    """Targets for a month, totalled per service."""
    month: int
    year: int
    per_service: Dict[int, int]
    total_target: int
    rows: List[MonthlyTargetResponse]


class DistributionRuleBase(BaseModel):
    """Base distribution rule schema."""
    period_name: str = Field(..., min_length=1, max_length=50)
    months: List[int]
    percentage: float = Field(..., ge=0, le=100)

    @field_validator("months")
    @classmethod
    def check_months(cls, months: List[int]) -> List[int]:
        for month in months:
            if month < 1 or month > 12:
                raise ValueError(f"Month must be 1-12, got {month}")
        return months


class DistributionRuleCreate(DistributionRuleBase):
    """Schema for a rule in a replacement rule set."""
    pass


class DistributionRuleResponse(DistributionRuleBase):
    """Schema for distribution rule response."""
    id: int

    class Config:
        from_attributes = True


class AnnualTargetSave(BaseModel):
    """Set a staff member's annual Self Assessment target for a financial year."""
    financial_year_start: int = Field(..., ge=2000, le=2100)
    annual_target: int
    overrides: Dict[int, int] = Field(default_factory=dict)


class AnnualTargetResponse(BaseModel):
    """Schema for annual target response."""
    id: int
    staff_id: int
    year: int
    annual_target: int
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class AllocationRequest(BaseModel):
    """Preview a Self Assessment allocation without saving it."""
    financial_year_start: int = Field(..., ge=2000, le=2100)
    annual_target: Optional[int] = None
    overrides: Dict[int, int] = Field(default_factory=dict)


class AllocationResponse(BaseModel):
    """Twelve-month Self Assessment allocation."""
    staff_id: int
    financial_year_start: int
    annual_target: int
    current_month: int
    actuals_by_period: Dict[str, int]
    allocation: Dict[int, int]
    total: int


class AnnualTargetSaveResponse(BaseModel):
    """Saved annual target with the allocation written to monthly targets."""
    annual_target: AnnualTargetResponse
    allocation: AllocationResponse


class SelfAssessmentProgressItem(BaseModel):
    """Self Assessment progress for one staff member."""
    staff_id: int
    name: str
    submitted: int
    full_year_target: int
    left_to_do: int


class SelfAssessmentProgressResponse(BaseModel):
    """Self Assessment progress for the team."""
    financial_year_start: int
    items: List[SelfAssessmentProgressItem]
    total_submitted: int
    total_target: int
    total_left_to_do: int
