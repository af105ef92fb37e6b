"""
Service Pydantic schemas for request/response validation.
"""

from pydantic import BaseModel, Field
from typing import List


class ServiceBase(BaseModel):
    """Base service schema."""
    service_name: str = Field(..., min_length=1, max_length=100)


class ServiceCreate(ServiceBase):
    """Schema for creating a service."""
    pass


class ServiceUpdate(ServiceBase):
    """Schema for renaming a service."""
    pass


class ServiceResponse(ServiceBase):
    """Schema for service response."""
    id: int

    class Config:
        from_attributes = True


class ServiceListResponse(BaseModel):
    """Schema for service list response."""
    items: List[ServiceResponse]
    total: int
