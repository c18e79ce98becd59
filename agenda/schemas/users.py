"""User schemas for request/response validation."""

from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field

from agenda.schemas.common import Name, PartialUpdate, Phone


class UserRole(str, Enum):
    """Staff role enumeration."""

    ADMIN = "admin"
    PROFESSIONAL = "professional"
    RECEPTION = "reception"


class AuthProvider(str, Enum):
    """Identity provider enumeration."""

    SUPABASE = "supabase"
    GOOGLE = "google"
    MICROSOFT = "microsoft"


class UserBase(BaseModel):
    """Base user schema with common fields."""

    name: Name
    email: EmailStr
    phone: Phone | None = None
    role: UserRole


class UserCreate(UserBase):
    """Schema for creating a new user."""

    id: UUID | None = Field(None, description="Identity id from the auth backend")
    password: str | None = Field(None, min_length=8)
    auth_provider: AuthProvider = AuthProvider.SUPABASE


class UserUpdate(PartialUpdate):
    """Schema for updating a user; passwords are changed through the auth backend."""

    nullable_fields = frozenset({"phone"})

    name: Name | None = None
    email: EmailStr | None = None
    phone: Phone | None = None
    role: UserRole | None = None


class UserResponse(BaseModel):
    """User schema for API responses."""

    id: UUID
    tenant_id: UUID
    name: str
    email: EmailStr
    phone: str | None = None
    role: UserRole
    auth_provider: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
