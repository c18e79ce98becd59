"""Notification schemas for request/response validation."""

from datetime import datetime
from enum import Enum
from typing import Any
from uuid import UUID

from pydantic import AwareDatetime, BaseModel

from agenda.schemas.common import PartialUpdate


class NotificationChannel(str, Enum):
    """Delivery channel enumeration."""

    EMAIL = "email"
    SMS = "sms"
    PUSH = "push"


class NotificationStatus(str, Enum):
    """Notification status enumeration."""

    PENDING = "pending"
    SENT = "sent"
    FAILED = "failed"


class NotificationCreate(BaseModel):
    """Schema for queueing a notification."""

    channel: NotificationChannel
    to: str
    template_code: str
    payload_json: dict[str, Any]
    scheduled_for: AwareDatetime | None = None


class NotificationUpdate(PartialUpdate):
    """Schema for recording a delivery attempt."""

    nullable_fields = frozenset({"sent_at"})

    status: NotificationStatus | None = None
    sent_at: AwareDatetime | None = None
    scheduled_for: AwareDatetime | None = None


class NotificationResponse(BaseModel):
    """Schema for notification response."""

    id: UUID
    tenant_id: UUID
    channel: NotificationChannel
    to: str
    template_code: str
    payload_json: dict[str, Any]
    status: NotificationStatus
    scheduled_for: datetime
    sent_at: datetime | None = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
