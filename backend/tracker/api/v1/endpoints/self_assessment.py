"""
Self Assessment API endpoints: distribution rules, annual targets,
allocation previews and progress.
"""

from typing import List
from fastapi import APIRouter, Depends, Query, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.core.clock import Clock
from tracker.core.events import EventBus
from tracker.db.session import get_db
from tracker.deps.di_container import get_clock, get_event_bus
from tracker.controllers.self_assessment_controller import SelfAssessmentController
from tracker.schemas.target import (
    AllocationRequest,
    AllocationResponse,
    AnnualTargetResponse,
    AnnualTargetSave,
    AnnualTargetSaveResponse,
    DistributionRuleCreate,
    DistributionRuleResponse,
    SelfAssessmentProgressResponse,
)

router = APIRouter()


@router.get("/rules", response_model=List[DistributionRuleResponse])
async def get_rules(
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> List[DistributionRuleResponse]:
    """Current distribution rules."""
    controller = SelfAssessmentController(db, clock)
    return await controller.get_rules()


@router.put("/rules", response_model=List[DistributionRuleResponse])
async def replace_rules(
    rules: List[DistributionRuleCreate],
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> List[DistributionRuleResponse]:
    """Replace the distribution rules."""
    controller = SelfAssessmentController(db, clock)
    return await controller.replace_rules(rules)


@router.get("/annual-targets/{staff_id}", response_model=AnnualTargetResponse)
async def get_annual_target(
    staff_id: int,
    financial_year_start: int = Query(..., ge=2000, le=2100),
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> AnnualTargetResponse:
    """Get a staff member's annual Self Assessment target."""
    controller = SelfAssessmentController(db, clock)
    target = await controller.get_annual_target(staff_id, financial_year_start)
    if not target:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Annual target not found",
        )
    return target


@router.put("/annual-targets/{staff_id}", response_model=AnnualTargetSaveResponse)
async def save_annual_target(
    staff_id: int,
    target_data: AnnualTargetSave,
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
    event_bus: EventBus = Depends(get_event_bus),
) -> AnnualTargetSaveResponse:
    """Save the annual target and rewrite the monthly Self Assessment targets."""
    controller = SelfAssessmentController(db, clock, event_bus)
    return await controller.save_annual_target(staff_id, target_data)


@router.post("/allocation/{staff_id}", response_model=AllocationResponse)
async def preview_allocation(
    staff_id: int,
    request: AllocationRequest,
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> AllocationResponse:
    """Preview a monthly allocation with optional overrides."""
    controller = SelfAssessmentController(db, clock)
    return await controller.preview_allocation(staff_id, request)


@router.get("/progress", response_model=SelfAssessmentProgressResponse)
async def get_progress(
    financial_year_start: int = Query(..., ge=2000, le=2100),
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> SelfAssessmentProgressResponse:
    """Self Assessment returns progress for the team."""
    controller = SelfAssessmentController(db, clock)
    return await controller.get_progress(financial_year_start)
