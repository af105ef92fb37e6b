"""
Service catalog controller.
"""

from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.controllers.base_controller import BaseController
from tracker.services.catalog_service import CatalogService
from tracker.schemas.service import ServiceCreate, ServiceUpdate, ServiceResponse, ServiceListResponse


class ServiceController(BaseController):
    """Controller for the catalog of delivered services."""

    def __init__(self, session: AsyncSession):
        self.catalog_service = CatalogService(session)

    async def create_service(self, service_data: ServiceCreate) -> ServiceResponse:
        return await self.catalog_service.create_service(service_data)

    async def get_service(self, service_id: int) -> Optional[ServiceResponse]:
        return await self.catalog_service.get_service(service_id)

    async def list_services(self) -> ServiceListResponse:
        services, total = await self.catalog_service.list_services()
        return ServiceListResponse(items=services, total=total)

    async def update_service(self, service_id: int, service_data: ServiceUpdate) -> Optional[ServiceResponse]:
        return await self.catalog_service.update_service(service_id, service_data)

    async def delete_service(self, service_id: int) -> bool:
        return await self.catalog_service.delete_service(service_id)
