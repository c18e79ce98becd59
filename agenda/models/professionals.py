"""Professionals table model using SQLAlchemy Core.

Each professional owns exactly one calendar; the calendar id is the
professional id.
"""

import uuid

from sqlalchemy import Boolean, Column, ForeignKey, Table, Text, Uuid, func, text

from agenda.models.base import UTCDateTime, metadata, utc_now

professionals = Table(
    "professionals",
    metadata,
    Column("id", Uuid, primary_key=True, default=uuid.uuid4),
    Column(
        "unit_id",
        Uuid,
        ForeignKey("units.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column("name", Text, nullable=False),
    Column("bio", Text),
    Column("active", Boolean, nullable=False, default=True, server_default=text("true")),
    Column("created_at", UTCDateTime, nullable=False, default=utc_now, server_default=func.now()),
    Column("updated_at", UTCDateTime, nullable=False, default=utc_now, server_default=func.now()),
)
