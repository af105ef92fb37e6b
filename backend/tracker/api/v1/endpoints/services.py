"""
Service catalog API endpoints.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.db.session import get_db
from tracker.controllers.service_controller import ServiceController
from tracker.schemas.service import (
    ServiceCreate,
    ServiceUpdate,
    ServiceResponse,
    ServiceListResponse,
)

router = APIRouter()


@router.post("", response_model=ServiceResponse, status_code=status.HTTP_201_CREATED)
async def create_service(
    service_data: ServiceCreate,
    db: AsyncSession = Depends(get_db),
) -> ServiceResponse:
    """Create a new service."""
    controller = ServiceController(db)
    return await controller.create_service(service_data)


@router.get("", response_model=ServiceListResponse)
async def list_services(
    db: AsyncSession = Depends(get_db),
) -> ServiceListResponse:
    """List services."""
    controller = ServiceController(db)
    return await controller.list_services()


@router.get("/{service_id}", response_model=ServiceResponse)
async def get_service(
    service_id: int,
    db: AsyncSession = Depends(get_db),
) -> ServiceResponse:
    """Get service by ID."""
    controller = ServiceController(db)
    service = await controller.get_service(service_id)
    if not service:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Service not found",
        )
    return service


@router.put("/{service_id}", response_model=ServiceResponse)
async def update_service(
    service_id: int,
    service_data: ServiceUpdate,
    db: AsyncSession = Depends(get_db),
) -> ServiceResponse:
    """Rename a service."""
    controller = ServiceController(db)
    service = await controller.update_service(service_id, service_data)
    if not service:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Service not found",
        )
    return service


@router.delete("/{service_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_service(
    service_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Delete a service."""
    controller = ServiceController(db)
    deleted = await controller.delete_service(service_id)
    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Service not found",
        )
