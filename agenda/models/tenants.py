"""Tenants table model using SQLAlchemy Core."""

import uuid

from sqlalchemy import CheckConstraint, Column, Table, Text, Uuid, func

from agenda.models.base import UTCDateTime, metadata, utc_now

tenants = Table(
    "tenants",
    metadata,
    Column("id", Uuid, primary_key=True, default=uuid.uuid4),
    Column("name", Text, nullable=False),
    Column("plan", Text, nullable=False, server_default="free"),
    Column("status", Text, nullable=False, server_default="active"),
    # Audit fields
    Column("created_at", UTCDateTime, nullable=False, default=utc_now, server_default=func.now()),
    Column("updated_at", UTCDateTime, nullable=False, default=utc_now, server_default=func.now()),
    CheckConstraint("plan IN ('free', 'basic', 'premium')", name="tenants_plan_check"),
    CheckConstraint(
        "status IN ('active', 'inactive', 'suspended')",
        name="tenants_status_check",
    ),
)
