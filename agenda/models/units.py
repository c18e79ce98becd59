"""Units table model using SQLAlchemy Core."""

import uuid

from sqlalchemy import Column, ForeignKey, Table, Text, Uuid, func

from agenda.models.base import UTCDateTime, metadata, utc_now

units = Table(
    "units",
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
    Column("address", Text, nullable=False),
    # IANA zone the unit's schedule rules are written in
    Column("timezone", Text, nullable=False, server_default="America/Sao_Paulo"),
    Column("created_at", UTCDateTime, nullable=False, default=utc_now, server_default=func.now()),
    Column("updated_at", UTCDateTime, nullable=False, default=utc_now, server_default=func.now()),
)
