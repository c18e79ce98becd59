"""Schedule rules table model using SQLAlchemy Core."""

import uuid

from sqlalchemy import CheckConstraint, Column, ForeignKey, Integer, Table, Time, Uuid, func

from agenda.models.base import UTCDateTime, metadata, utc_now

schedule_rules = Table(
    "schedule_rules",
    metadata,
    Column("id", Uuid, primary_key=True, default=uuid.uuid4),
    Column(
        "calendar_id",
        Uuid,
        ForeignKey("professionals.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    # 0 = Sunday ... 6 = Saturday
    Column("day_of_week", Integer, nullable=False),
    # Wall-clock times in the unit's timezone
    Column("start_time", Time, nullable=False),
    Column("end_time", Time, nullable=False),
    Column("slot_minutes", Integer, nullable=False, server_default="15"),
    Column("created_at", UTCDateTime, nullable=False, default=utc_now, server_default=func.now()),
    Column("updated_at", UTCDateTime, nullable=False, default=utc_now, server_default=func.now()),
    CheckConstraint("day_of_week BETWEEN 0 AND 6", name="schedule_rules_day_check"),
    CheckConstraint("start_time < end_time", name="schedule_rules_window_check"),
    CheckConstraint("slot_minutes > 0", name="schedule_rules_slot_check"),
)
