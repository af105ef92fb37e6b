"""
Service catalog (Accounts, VAT, Self Assessments, ...) business logic.
"""

from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.core.exceptions import InvalidInputError
from tracker.services.base_service import BaseService
from tracker.db.repositories.service_repository import ServiceRepository
from tracker.schemas.service import ServiceCreate, ServiceUpdate, ServiceResponse


class CatalogService(BaseService):
    """Service for the catalog of deliverable services."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.service_repo = ServiceRepository(session)

    async def create_service(self, service_data: ServiceCreate) -> ServiceResponse:
        """Create a new service; names are unique regardless of case."""
        if await self.service_repo.get_by_name(service_data.service_name):
            raise InvalidInputError(f"Service '{service_data.service_name}' already exists")
        service = await self.service_repo.create(**service_data.model_dump())
        await self.session.commit()
        await self.session.refresh(service)
        return ServiceResponse.model_validate(service)

    async def get_service(self, service_id: int) -> Optional[ServiceResponse]:
        service = await self.service_repo.get(service_id)
        if not service:
            return None
        return ServiceResponse.model_validate(service)

    async def list_services(self) -> tuple[List[ServiceResponse], int]:
        services = await self.service_repo.list_services()
        return [ServiceResponse.model_validate(service) for service in services], len(services)

    async def update_service(self, service_id: int, service_data: ServiceUpdate) -> Optional[ServiceResponse]:
        """Rename a service."""
        service = await self.service_repo.get(service_id)
        if not service:
            return None
        existing = await self.service_repo.get_by_name(service_data.service_name)
        if existing is not None and existing.id != service_id:
            raise InvalidInputError(f"Service '{service_data.service_name}' already exists")

        updated = await self.service_repo.update(service_id, **service_data.model_dump())
        await self.session.commit()
        await self.session.refresh(updated)
        return ServiceResponse.model_validate(updated)

    async def delete_service(self, service_id: int) -> bool:
        deleted = await self.service_repo.delete(service_id)
        await self.session.commit()
        return deleted
