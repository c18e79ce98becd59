"""Service (catalog item) schemas for request/response validation."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field

from agenda.schemas.common import Name, PartialUpdate


class ServiceCreate(BaseModel):
    """Schema for creating a bookable service."""

    name: Name
    duration_minutes: int = Field(..., ge=15, le=480)
    base_price: Decimal = Field(..., ge=0, le=10000, decimal_places=2)
    active: bool = True


class ServiceUpdate(PartialUpdate):
    """Schema for updating a service."""

    name: Name | None = None
    duration_minutes: int | None = Field(None, ge=15, le=480)
    base_price: Decimal | None = Field(None, ge=0, le=10000, decimal_places=2)
    active: bool | None = None


class ServiceResponse(BaseModel):
    """Schema for service response."""

    id: UUID
    tenant_id: UUID
    name: str
    duration_minutes: int
    base_price: Decimal
    active: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
