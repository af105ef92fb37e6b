"""
API v1 router that aggregates all endpoint routers.
"""

from fastapi import APIRouter

from tracker.api.v1.endpoints import (
    health,
    staff,
    services,
    activities,
    targets,
    self_assessment,
    working_days,
    bank_holidays,
    leave,
    analytics,
)

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(staff.router, prefix="/staff", tags=["staff"])
api_router.include_router(services.router, prefix="/services", tags=["services"])
api_router.include_router(activities.router, prefix="/activities", tags=["activities"])
api_router.include_router(targets.router, prefix="/targets", tags=["targets"])
api_router.include_router(self_assessment.router, prefix="/self-assessment", tags=["self-assessment"])
api_router.include_router(working_days.router, prefix="/working-days", tags=["working-days"])
api_router.include_router(bank_holidays.router, prefix="/bank-holidays", tags=["bank-holidays"])
api_router.include_router(leave.router, prefix="/leave", tags=["leave"])
api_router.include_router(analytics.router, prefix="/analytics", tags=["analytics"])
