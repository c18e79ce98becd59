"""Time-off (blocked interval) table model using SQLAlchemy Core."""

import uuid

from sqlalchemy import CheckConstraint, Column, ForeignKey, Index, Table, Text, Uuid, func

from agenda.models.base import UTCDateTime, metadata, utc_now

time_off = Table(
    "time_off",
    metadata,
    Column("id", Uuid, primary_key=True, default=uuid.uuid4),
    Column(
        "calendar_id",
        Uuid,
        ForeignKey("professionals.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("start", UTCDateTime, nullable=False),
    Column("end", UTCDateTime, nullable=False),
    Column("reason", Text, nullable=False),
    Column("created_at", UTCDateTime, nullable=False, default=utc_now, server_default=func.now()),
    Column("updated_at", UTCDateTime, nullable=False, default=utc_now, server_default=func.now()),
    CheckConstraint('start < "end"', name="time_off_interval_check"),
    Index("ix_time_off_calendar_start", "calendar_id", "start"),
)
