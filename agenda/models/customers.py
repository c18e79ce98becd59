"""Customers table model using SQLAlchemy Core."""

import uuid

from sqlalchemy import Column, ForeignKey, String, Table, Text, UniqueConstraint, Uuid, func

from agenda.models.base import JSONType, UTCDateTime, metadata, utc_now

DEFAULT_CONSENT_FLAGS = {
    "marketing": False,
    "reminders": True,
    "notifications": True,
}

customers = Table(
    "customers",
    metadata,
    Column("id", Uuid, primary_key=True, default=uuid.uuid4),
    Column(
        "tenant_id",
        Uuid,
        ForeignKey("tenants.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column("name", Text, nullable=False),
    Column("email", Text, nullable=False),
    Column("phone", String(20)),
    Column("consent_flags", JSONType, nullable=False, default=lambda: dict(DEFAULT_CONSENT_FLAGS)),
    Column("created_at", UTCDateTime, nullable=False, default=utc_now, server_default=func.now()),
    Column("updated_at", UTCDateTime, nullable=False, default=utc_now, server_default=func.now()),
    UniqueConstraint("tenant_id", "email", name="customers_tenant_email_key"),
)
