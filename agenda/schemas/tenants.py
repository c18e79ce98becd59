"""Tenant schemas for request/response validation."""

from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel

from agenda.schemas.common import Name, PartialUpdate


class TenantPlan(str, Enum):
    """Subscription plan enumeration."""

    FREE = "free"
    BASIC = "basic"
    PREMIUM = "premium"


class TenantStatus(str, Enum):
    """Tenant status enumeration."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"


class TenantCreate(BaseModel):
    """Schema for creating a tenant."""

    name: Name
    plan: TenantPlan = TenantPlan.FREE
    status: TenantStatus = TenantStatus.ACTIVE


class TenantUpdate(PartialUpdate):
    """Schema for updating a tenant."""

    name: Name | None = None
    plan: TenantPlan | None = None
    status: TenantStatus | None = None


class TenantResponse(BaseModel):
    """Schema for tenant response."""

    id: UUID
    name: str
    plan: TenantPlan
    status: TenantStatus
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
