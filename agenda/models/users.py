"""User model definition using SQLAlchemy Core."""

import uuid

from sqlalchemy import CheckConstraint, Column, ForeignKey, String, Table, Text, Uuid, func

from agenda.models.base import UTCDateTime, metadata, utc_now

users = Table(
    "users",
    metadata,
    # Same id as the identity in the auth backend
    Column("id", Uuid, primary_key=True, default=uuid.uuid4),
    Column(
        "tenant_id",
        Uuid,
        ForeignKey("tenants.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column("name", Text, nullable=False),
    Column("email", Text, nullable=False, unique=True, index=True),
    Column("phone", String(20)),
    Column("role", Text, nullable=False, server_default="reception"),
    Column("password_hash", Text),
    Column("auth_provider", Text, server_default="supabase"),
    Column("created_at", UTCDateTime, nullable=False, default=utc_now, server_default=func.now()),
    Column("updated_at", UTCDateTime, nullable=False, default=utc_now, server_default=func.now()),
    CheckConstraint("role IN ('admin', 'professional', 'reception')", name="users_role_check"),
    CheckConstraint(
        "auth_provider IS NULL OR auth_provider IN ('supabase', 'google', 'microsoft')",
        name="users_auth_provider_check",
    ),
)
