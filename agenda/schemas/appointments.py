"""Appointment schemas for request/response validation."""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from uuid import UUID

from pydantic import AwareDatetime, BaseModel, EmailStr, Field, model_validator

from agenda.schemas.common import Name, PaginatedResponse, PartialUpdate, Phone


class AppointmentStatus(str, Enum):
    """Appointment status enumeration."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    NO_SHOW = "no_show"
    COMPLETED = "completed"

    @property
    def occupies_slot(self) -> bool:
        """Whether an appointment in this status holds the professional's time."""
        return self not in (AppointmentStatus.CANCELLED, AppointmentStatus.NO_SHOW)


class AppointmentSource(str, Enum):
    """Appointment source enumeration."""

    WEB = "web"
    PHONE = "phone"
    WALK_IN = "walk_in"


class CustomerData(BaseModel):
    """Inline customer details for bookings by new customers."""

    name: Name
    email: EmailStr
    phone: Phone | None = None


class AppointmentCreate(BaseModel):
    """Schema for creating a new appointment."""

    unit_id: UUID
    professional_id: UUID
    service_id: UUID
    start: AwareDatetime
    customer_id: UUID | None = None
    customer_data: CustomerData | None = None
    source: AppointmentSource = AppointmentSource.WEB
    notes: str | None = Field(None, max_length=500)
    idempotency_key: str | None = Field(None, min_length=1, max_length=255)

    @model_validator(mode="after")
    def validate_customer(self) -> "AppointmentCreate":
        """Require either an existing customer or inline customer data."""
        if self.customer_id is None and self.customer_data is None:
            raise ValueError("Either customer_id or customer_data is required")
        return self


class AppointmentUpdate(PartialUpdate):
    """Schema for updating an existing appointment."""

    nullable_fields = frozenset({"notes"})

    status: AppointmentStatus | None = None
    start: AwareDatetime | None = None
    end: AwareDatetime | None = None
    notes: str | None = Field(None, max_length=500)

    @model_validator(mode="after")
    def validate_interval(self) -> "AppointmentUpdate":
        """Validate start is before end when both are given."""
        if self.start and self.end and self.start >= self.end:
            raise ValueError("start must be before end")
        return self


class AppointmentStatusUpdate(BaseModel):
    """Schema for updating appointment status."""

    status: AppointmentStatus
    notes: str | None = Field(None, max_length=500)


class AppointmentResponse(BaseModel):
    """Schema for appointment response."""

    id: UUID
    tenant_id: UUID
    unit_id: UUID
    customer_id: UUID
    professional_id: UUID
    service_id: UUID
    start: datetime
    end: datetime
    status: AppointmentStatus
    source: AppointmentSource
    price_estimate: Decimal
    notes: str | None = None
    idempotency_key: str | None = None
    created_at: datetime
    updated_at: datetime
    # Joined display fields
    customer_name: str | None = None
    customer_email: str | None = None
    professional_name: str | None = None
    service_name: str | None = None
    unit_name: str | None = None

    model_config = {"from_attributes": True}


AppointmentListResponse = PaginatedResponse[AppointmentResponse]


class AppointmentFilters(BaseModel):
    """Schema for appointment filtering."""

    unit_id: UUID | None = None
    professional_id: UUID | None = None
    customer_id: UUID | None = None
    status: AppointmentStatus | None = None
    from_date: AwareDatetime | None = None
    to_date: AwareDatetime | None = None
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=20, ge=1, le=100)
