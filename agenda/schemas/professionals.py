"""Professional schemas for request/response validation."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from agenda.schemas.common import Name, PartialUpdate


class ProfessionalCreate(BaseModel):
    """Schema for creating a professional."""

    unit_id: UUID
    name: Name
    bio: str | None = Field(None, max_length=500)
    active: bool = True


class ProfessionalUpdate(PartialUpdate):
    """Schema for updating a professional."""

    nullable_fields = frozenset({"bio"})

    name: Name | None = None
    bio: str | None = Field(None, max_length=500)
    active: bool | None = None


class ProfessionalResponse(BaseModel):
    """Schema for professional response."""

    id: UUID
    unit_id: UUID
    name: str
    bio: str | None = None
    active: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
