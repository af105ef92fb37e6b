"""
Health check endpoint.
Returns system status and uptime information.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.controllers.health_controller import HealthController
from tracker.db.session import get_db
from tracker.deps.di_container import get_health_controller
from tracker.schemas.health import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def get_health(
    db: AsyncSession = Depends(get_db),
    controller: HealthController = Depends(get_health_controller),
) -> HealthResponse:
    """
    Health check endpoint.
    Returns system status, uptime, and health checks.
    """
    return await controller.get_health(db)
