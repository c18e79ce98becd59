"""Customer schemas for request/response validation."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr

from agenda.schemas.common import Name, PaginatedResponse, PartialUpdate, Phone


class ConsentFlags(BaseModel):
    """Communication consent given by a customer."""

    marketing: bool = False
    reminders: bool = True
    notifications: bool = True


class CustomerBase(BaseModel):
    """Base customer schema with common fields."""

    name: Name
    email: EmailStr
    phone: Phone | None = None


class CustomerCreate(CustomerBase):
    """Schema for creating a customer."""

    consent_flags: ConsentFlags = ConsentFlags()


class CustomerUpdate(PartialUpdate):
    """Schema for updating a customer."""

    nullable_fields = frozenset({"phone"})

    name: Name | None = None
    email: EmailStr | None = None
    phone: Phone | None = None
    consent_flags: ConsentFlags | None = None


class CustomerResponse(CustomerBase):
    """Schema for customer response."""

    id: UUID
    tenant_id: UUID
    consent_flags: ConsentFlags
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


CustomerListResponse = PaginatedResponse[CustomerResponse]
