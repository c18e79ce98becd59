"""Authentication schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field

from agenda.schemas.common import Name
from agenda.schemas.users import UserRole


class LoginRequest(BaseModel):
    """Email/password login request."""

    email: EmailStr
    password: str = Field(..., min_length=6)


class SignupRequest(BaseModel):
    """Signup request creating a tenant and its first admin."""

    name: Name
    email: EmailStr
    password: str = Field(..., min_length=8)
    tenant_name: Name


class RefreshTokenRequest(BaseModel):
    """Token refresh request schema."""

    refresh_token: str


class AuthUser(BaseModel):
    """The authenticated staff member."""

    id: UUID
    tenant_id: UUID
    email: EmailStr
    name: str
    role: UserRole

    model_config = {"from_attributes": True}


class AuthResponse(BaseModel):
    """
    Login/signup response with tokens and user info.

    Tokens are absent after a signup that still awaits email confirmation.
    """

    user: AuthUser
    access_token: str | None = None
    refresh_token: str | None = None
    token_type: str = "bearer"
    expires_in: int | None = None


class SessionResponse(BaseModel):
    """Current session details."""

    user: AuthUser
    expires_at: datetime | None = None
