"""
Analytics API endpoints for the dashboard and team views.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.core.clock import Clock
from tracker.db.session import get_db
from tracker.deps.di_container import get_clock
from tracker.controllers.analytics_controller import AnalyticsController
from tracker.schemas.analytics import (
    PerformanceSummaryResponse,
    PredictionResponse,
    RunRateResponse,
    StaffPerformanceResponse,
    TeamAnalyticsResponse,
)

router = APIRouter()


@router.get("/summary", response_model=PerformanceSummaryResponse)
async def get_summary(
    financial_year_start: int = Query(..., ge=2000, le=2100),
    month: int = Query(..., ge=1, le=12),
    staff_id: Optional[int] = Query(None),
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> PerformanceSummaryResponse:
    """Delivered against expected-to-date."""
    controller = AnalyticsController(db, clock)
    return await controller.get_summary(financial_year_start, month, staff_id)


@router.get("/run-rate", response_model=RunRateResponse)
async def get_run_rate(
    financial_year_start: int = Query(..., ge=2000, le=2100),
    month: int = Query(..., ge=1, le=12),
    staff_id: Optional[int] = Query(None),
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> RunRateResponse:
    """Cumulative expected and actual delivery by day."""
    controller = AnalyticsController(db, clock)
    return await controller.get_run_rate(financial_year_start, month, staff_id)


@router.get("/prediction", response_model=PredictionResponse)
async def get_prediction(
    financial_year_start: int = Query(..., ge=2000, le=2100),
    month: int = Query(..., ge=1, le=12),
    staff_id: int = Query(...),
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> PredictionResponse:
    """Projected month-end delivery for a staff member."""
    controller = AnalyticsController(db, clock)
    return await controller.get_prediction(financial_year_start, month, staff_id)


@router.get("/staff-performance", response_model=StaffPerformanceResponse)
async def get_staff_performance(
    financial_year_start: int = Query(..., ge=2000, le=2100),
    month: int = Query(..., ge=1, le=12),
    sort: str = Query("desc"),
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> StaffPerformanceResponse:
    """Per staff delivery for a month."""
    controller = AnalyticsController(db, clock)
    return await controller.get_staff_performance(financial_year_start, month, sort)


@router.get("/team", response_model=TeamAnalyticsResponse)
async def get_team_analytics(
    financial_year_start: int = Query(..., ge=2000, le=2100),
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> TeamAnalyticsResponse:
    """Financial-year analytics for the team."""
    controller = AnalyticsController(db, clock)
    return await controller.get_team_analytics(financial_year_start)
