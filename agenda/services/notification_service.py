"""Notification queue (rows only; delivery happens elsewhere)."""

from datetime import datetime
from typing import Any
from uuid import UUID

import structlog
from sqlalchemy import and_, insert, select, update

from agenda.core.exceptions import NotFoundException
from agenda.database import CredentialTier, Database
from agenda.models import notifications
from agenda.models.base import utc_now
from agenda.schemas.common import column_values
from agenda.schemas.notifications import (
    NotificationChannel,
    NotificationCreate,
    NotificationResponse,
    NotificationStatus,
    NotificationUpdate,
)
from agenda.utils.formatting import format_currency, format_date, format_time

logger = structlog.get_logger()

APPOINTMENT_CREATED = "appointment_created"
APPOINTMENT_STATUS_CHANGED = "appointment_status_changed"


def appointment_payload(
    appointment: dict[str, Any],
    *,
    timezone: str,
    currency: str = "BRL",
) -> dict[str, Any]:
    """
    Template variables describing an appointment, formatted for display.

    Args:
        appointment: Appointment row joined with display names
        timezone: Zone the customer sees times in (the unit's)
        currency: Currency of the price estimate
    """
    return {
        "appointment_id": str(appointment["id"]),
        "customer_name": appointment.get("customer_name"),
        "professional_name": appointment.get("professional_name"),
        "service_name": appointment.get("service_name"),
        "unit_name": appointment.get("unit_name"),
        "status": appointment["status"],
        "date": format_date(appointment["start"], timezone=timezone),
        "time": format_time(appointment["start"], timezone=timezone),
        "end_time": format_time(appointment["end"], timezone=timezone),
        "price": format_currency(appointment["price_estimate"], currency),
    }


class NotificationService:
    """Service for queueing and tracking notifications."""

    def __init__(self, database: Database):
        """Initialize service with the storage handle."""
        self.database = database

    async def create_notification(
        self,
        tenant_id: UUID,
        data: NotificationCreate,
        tier: CredentialTier = CredentialTier.USER,
    ) -> NotificationResponse:
        """Queue a notification; it starts as pending."""
        values = column_values(data, exclude_none=True)
        values["tenant_id"] = tenant_id
        values["status"] = NotificationStatus.PENDING.value

        async with self.database.session(tier) as db:
            result = await db.execute(
                insert(notifications).values(**values).returning(notifications)
            )
            row = result.mappings().one()
            await db.commit()

        logger.info(
            "notification_queued",
            notification_id=str(row["id"]),
            template_code=row["template_code"],
        )
        return NotificationResponse.model_validate(dict(row))

    async def list_pending(
        self,
        tenant_id: UUID | None = None,
        now: datetime | None = None,
        tier: CredentialTier = CredentialTier.SERVICE,
    ) -> list[NotificationResponse]:
        """
        List pending notifications that are due.

        Args:
            tenant_id: Restrict to one tenant; all tenants when None
            now: Reference time (defaults to the current time)
            tier: Credential tier to run under

        Returns:
            Due notifications ordered by scheduled time
        """
        conditions = [
            notifications.c.status == NotificationStatus.PENDING.value,
            notifications.c.scheduled_for <= (now or utc_now()),
        ]
        if tenant_id is not None:
            conditions.append(notifications.c.tenant_id == tenant_id)

        stmt = (
            select(notifications)
            .where(and_(*conditions))
            .order_by(notifications.c.scheduled_for)
        )

        async with self.database.session(tier) as db:
            result = await db.execute(stmt)
            rows = result.mappings().all()

        return [NotificationResponse.model_validate(dict(row)) for row in rows]

    async def update_notification(
        self,
        notification_id: UUID,
        data: NotificationUpdate,
        tenant_id: UUID | None = None,
        tier: CredentialTier = CredentialTier.SERVICE,
    ) -> NotificationResponse:
        """
        Record a delivery attempt, e.g. mark sent or failed.

        Marking a notification sent without ``sent_at`` stamps the current time.

        Raises:
            NotFoundException: If notification not found
        """
        values = column_values(data, exclude_unset=True)
        if values.get("status") == NotificationStatus.SENT.value and not values.get("sent_at"):
            values["sent_at"] = utc_now()
        values["updated_at"] = utc_now()

        conditions = [notifications.c.id == notification_id]
        if tenant_id is not None:
            conditions.append(notifications.c.tenant_id == tenant_id)

        async with self.database.session(tier) as db:
            result = await db.execute(
                update(notifications)
                .where(and_(*conditions))
                .values(**values)
                .returning(notifications)
            )
            row = result.mappings().first()
            if not row:
                raise NotFoundException("Notification not found")
            await db.commit()

        return NotificationResponse.model_validate(dict(row))

    async def queue_appointment_notification(
        self,
        tenant_id: UUID,
        appointment: dict[str, Any],
        template_code: str,
        *,
        timezone: str,
        currency: str = "BRL",
        tier: CredentialTier = CredentialTier.SERVICE,
    ) -> NotificationResponse | None:
        """
        Queue an email to the appointment's customer if they consented.

        Returns:
            The queued notification, or None when the customer opted out
        """
        consent = appointment.get("customer_consent_flags") or {}
        if not consent.get("notifications", False) or not appointment.get("customer_email"):
            logger.debug("notification_skipped", appointment_id=str(appointment["id"]))
            return None

        data = NotificationCreate(
            channel=NotificationChannel.EMAIL,
            to=appointment["customer_email"],
            template_code=template_code,
            payload_json=appointment_payload(appointment, timezone=timezone, currency=currency),
        )
        return await self.create_notification(tenant_id, data, tier)
