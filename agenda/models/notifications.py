"""Notification rows queued for later delivery."""

import uuid

from sqlalchemy import CheckConstraint, Column, ForeignKey, Index, Table, Text, Uuid, func

from agenda.models.base import JSONType, UTCDateTime, metadata, utc_now

notifications = Table(
    "notifications",
    metadata,
    Column("id", Uuid, primary_key=True, default=uuid.uuid4),
    Column("tenant_id", Uuid, ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False),
    Column("channel", Text, nullable=False),
    Column("to", Text, nullable=False),
    Column("template_code", Text, nullable=False),
    Column("payload_json", JSONType, nullable=False, default=dict),
    Column("status", Text, nullable=False, server_default="pending"),
    Column("scheduled_for", UTCDateTime, nullable=False, default=utc_now),
    Column("sent_at", UTCDateTime, nullable=True),
    Column("created_at", UTCDateTime, nullable=False, default=utc_now, server_default=func.now()),
    Column("updated_at", UTCDateTime, nullable=False, default=utc_now, server_default=func.now()),
    CheckConstraint("channel IN ('email', 'sms', 'push')", name="notifications_channel_check"),
    CheckConstraint(
        "status IN ('pending', 'sent', 'failed')",
        name="notifications_status_check",
    ),
    Index("ix_notifications_status_scheduled", "status", "scheduled_for"),
)
