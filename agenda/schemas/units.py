"""Unit schemas for request/response validation."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from agenda.schemas.common import Name, PartialUpdate, TimezoneName


class UnitCreate(BaseModel):
    """Schema for creating a unit (a physical location of a tenant)."""

    name: Name
    address: str = Field(..., min_length=10, max_length=300)
    timezone: TimezoneName = "America/Sao_Paulo"


class UnitUpdate(PartialUpdate):
    """Schema for updating a unit."""

    name: Name | None = None
    address: str | None = Field(None, min_length=10, max_length=300)
    timezone: TimezoneName | None = None


class UnitResponse(BaseModel):
    """Schema for unit response."""

    id: UUID
    tenant_id: UUID
    name: str
    address: str
    timezone: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
