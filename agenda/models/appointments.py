"""Appointments table model using SQLAlchemy Core."""

import uuid

from sqlalchemy import (
    CheckConstraint,
    Column,
    ForeignKey,
    Index,
    Numeric,
    String,
    Table,
    Text,
    Uuid,
    func,
)

from agenda.models.base import UTCDateTime, metadata, utc_now

# Statuses that hold a professional's time
OCCUPYING_STATUSES = ("pending", "confirmed", "completed")

appointments = Table(
    "appointments",
    metadata,
    Column("id", Uuid, primary_key=True, default=uuid.uuid4),
    # Ownership / references
    Column("tenant_id", Uuid, ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False),
    Column("unit_id", Uuid, ForeignKey("units.id"), nullable=False),
    Column("customer_id", Uuid, ForeignKey("customers.id"), nullable=False),
    Column("professional_id", Uuid, ForeignKey("professionals.id"), nullable=False),
    Column("service_id", Uuid, ForeignKey("services.id"), nullable=False),
    # Half-open interval [start, end)
    Column("start", UTCDateTime, nullable=False),
    Column("end", UTCDateTime, nullable=False),
    # Status management
    Column("status", Text, nullable=False, server_default="pending"),
    Column("source", Text, nullable=False, server_default="web"),
    Column("price_estimate", Numeric(10, 2), nullable=False, server_default="0"),
    Column("notes", Text),
    Column("idempotency_key", String(255), unique=True),
    # Audit fields
    Column("created_at", UTCDateTime, nullable=False, default=utc_now, server_default=func.now()),
    Column("updated_at", UTCDateTime, nullable=False, default=utc_now, server_default=func.now()),
    # Constraints
    CheckConstraint(
        "status IN ('pending', 'confirmed', 'cancelled', 'no_show', 'completed')",
        name="appointments_status_check",
    ),
    CheckConstraint("source IN ('web', 'phone', 'walk_in')", name="appointments_source_check"),
    CheckConstraint('start < "end"', name="appointments_interval_check"),
    Index("ix_appointments_tenant_start", "tenant_id", "start"),
    Index("ix_appointments_professional_start", "professional_id", "start"),
)
