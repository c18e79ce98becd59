"""Services (catalog) table model using SQLAlchemy Core."""

import uuid

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    ForeignKey,
    Integer,
    Numeric,
    Table,
    Text,
    Uuid,
    func,
    text,
)

from agenda.models.base import UTCDateTime, metadata, utc_now

services = Table(
    "services",
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
    Column("duration_minutes", Integer, nullable=False),
    Column("base_price", Numeric(10, 2), nullable=False, server_default="0"),
    Column("active", Boolean, nullable=False, default=True, server_default=text("true")),
    Column("created_at", UTCDateTime, nullable=False, default=utc_now, server_default=func.now()),
    Column("updated_at", UTCDateTime, nullable=False, default=utc_now, server_default=func.now()),
    CheckConstraint("duration_minutes > 0", name="services_duration_check"),
    CheckConstraint("base_price >= 0", name="services_price_check"),
)
