"""Appointment service for business logic."""

from datetime import datetime, timedelta
from typing import Any
from uuid import UUID

import structlog
from sqlalchemy import and_, delete, func, insert, select, update
from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from agenda.config import Settings
from agenda.core.exceptions import (
    BadRequestException,
    ConflictException,
    FieldError,
    NotFoundException,
    ValidationException,
)
from agenda.database import CredentialTier, Database
from agenda.models import (
    OCCUPYING_STATUSES,
    appointments,
    customers,
    professionals,
    services,
    units,
)
from agenda.models.base import utc_now
from agenda.scheduling import overlap_clause
from agenda.schemas.appointments import (
    AppointmentCreate,
    AppointmentFilters,
    AppointmentListResponse,
    AppointmentResponse,
    AppointmentStatus,
    AppointmentStatusUpdate,
    AppointmentUpdate,
)
from agenda.schemas.common import column_values
from agenda.schemas.customers import CustomerCreate
from agenda.services.catalog_service import ensure_service
from agenda.services.customer_service import find_customer_by_email, insert_customer
from agenda.services.notification_service import (
    APPOINTMENT_CREATED,
    APPOINTMENT_STATUS_CHANGED,
    NotificationService,
)
from agenda.services.professional_service import ensure_professional
from agenda.utils.pagination import calculate_pagination

logger = structlog.get_logger()

SERIALIZATION_FAILURE = "40001"


def _joined_select():
    """Appointments with the display names of their related rows."""
    return select(
        appointments,
        customers.c.name.label("customer_name"),
        customers.c.email.label("customer_email"),
        customers.c.consent_flags.label("customer_consent_flags"),
        professionals.c.name.label("professional_name"),
        services.c.name.label("service_name"),
        units.c.name.label("unit_name"),
        units.c.timezone.label("unit_timezone"),
    ).select_from(
        appointments.outerjoin(customers, customers.c.id == appointments.c.customer_id)
        .outerjoin(professionals, professionals.c.id == appointments.c.professional_id)
        .outerjoin(services, services.c.id == appointments.c.service_id)
        .outerjoin(units, units.c.id == appointments.c.unit_id)
    )


def _is_serialization_failure(error: DBAPIError) -> bool:
    """Whether the driver reported a serialization failure (SQLSTATE 40001)."""
    orig = error.orig
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    return code == SERIALIZATION_FAILURE


async def find_conflicts(
    db: AsyncSession,
    professional_id: UUID,
    start: datetime,
    end: datetime,
    exclude_id: UUID | None = None,
) -> list[dict[str, Any]]:
    """
    Occupying appointments of a professional that intersect [start, end).

    Args:
        db: Session whose transaction the check runs in
        professional_id: Calendar to check
        start: Interval start
        end: Interval end
        exclude_id: Appointment to ignore (the one being updated)

    Returns:
        Conflicting appointment rows
    """
    conditions = [
        appointments.c.professional_id == professional_id,
        appointments.c.status.in_(OCCUPYING_STATUSES),
        overlap_clause(appointments.c.start, appointments.c.end, start, end),
    ]
    if exclude_id is not None:
        conditions.append(appointments.c.id != exclude_id)

    result = await db.execute(
        select(appointments).where(and_(*conditions)).order_by(appointments.c.start)
    )
    return [dict(row) for row in result.mappings().all()]


class AppointmentService:
    """
    Service for managing appointments.

    Writes run in a transaction pinned to the booking isolation level; the
    conflict check and the insert or update share that transaction.
    """

    def __init__(self, database: Database, settings: Settings | None = None):
        """Initialize service with the storage handle."""
        self.database = database
        self.settings = settings
        self.notifications = NotificationService(database)

    async def create_appointment(
        self,
        tenant_id: UUID,
        data: AppointmentCreate,
        tier: CredentialTier = CredentialTier.USER,
    ) -> AppointmentResponse:
        """
        Book an appointment.

        A request carrying an idempotency key that was already used returns
        the appointment created by that earlier request, unchanged. Otherwise
        the end is derived from the service duration and the booking is
        rejected if it overlaps an occupying appointment of the professional.

        Args:
            tenant_id: Owning tenant
            data: Booking request
            tier: Credential tier to run under

        Returns:
            The created (or replayed) appointment

        Raises:
            NotFoundException: If the unit, professional, service or customer
                does not exist in this tenant
            BadRequestException: If the professional works in another unit
            ConflictException: If the interval is taken
        """
        async with self.database.session(tier) as db:
            await self.database.pin_isolation(db, tier)

            if data.idempotency_key:
                existing = await self._find_by_key(db, data.idempotency_key)
                if existing:
                    return self._replay(tenant_id, existing)

            professional = await ensure_professional(db, tenant_id, data.professional_id)
            if professional["unit_id"] != data.unit_id:
                raise BadRequestException("Professional does not work at this unit")
            service = await ensure_service(db, tenant_id, data.service_id)

            customer_id = await self._resolve_customer(db, tenant_id, data)
            start = data.start
            end = start + timedelta(minutes=service["duration_minutes"])

            conflicts = await find_conflicts(db, data.professional_id, start, end)
            if conflicts:
                logger.info(
                    "appointment_conflict",
                    professional_id=str(data.professional_id),
                    start=start.isoformat(),
                    conflicting_ids=[str(row["id"]) for row in conflicts],
                )
                raise ConflictException("Time slot is not available")

            values = {
                "tenant_id": tenant_id,
                "unit_id": data.unit_id,
                "customer_id": customer_id,
                "professional_id": data.professional_id,
                "service_id": data.service_id,
                "start": start,
                "end": end,
                "status": AppointmentStatus.PENDING.value,
                "source": data.source.value,
                "price_estimate": service["base_price"],
                "notes": data.notes,
                "idempotency_key": data.idempotency_key,
            }

            try:
                result = await db.execute(
                    insert(appointments).values(**values).returning(appointments.c.id)
                )
                appointment_id = result.scalar_one()
                await db.commit()
            except IntegrityError as e:
                await db.rollback()
                if data.idempotency_key:
                    existing = await self._find_by_key(db, data.idempotency_key)
                    if existing:
                        return self._replay(tenant_id, existing)
                logger.info("appointment_conflict", professional_id=str(data.professional_id))
                raise ConflictException("Time slot is not available") from e
            except DBAPIError as e:
                if _is_serialization_failure(e):
                    raise ConflictException("Time slot is not available") from e
                raise

            row = await self._get_joined(db, tenant_id, appointment_id)

        logger.info(
            "appointment_created",
            appointment_id=str(appointment_id),
            professional_id=str(data.professional_id),
            start=start.isoformat(),
        )
        await self._notify(tenant_id, row, APPOINTMENT_CREATED)
        return AppointmentResponse.model_validate(row)

    async def list_appointments(
        self,
        tenant_id: UUID,
        filters: AppointmentFilters,
        tier: CredentialTier = CredentialTier.USER,
    ) -> AppointmentListResponse:
        """
        List appointments with filtering and pagination.

        Args:
            tenant_id: Owning tenant
            filters: Filter and pagination parameters; from/to bound the start
            tier: Credential tier to run under

        Returns:
            Paginated appointments, latest start first
        """
        conditions = [appointments.c.tenant_id == tenant_id]

        if filters.unit_id:
            conditions.append(appointments.c.unit_id == filters.unit_id)

        if filters.professional_id:
            conditions.append(appointments.c.professional_id == filters.professional_id)

        if filters.customer_id:
            conditions.append(appointments.c.customer_id == filters.customer_id)

        if filters.status:
            conditions.append(appointments.c.status == filters.status.value)

        if filters.from_date:
            conditions.append(appointments.c.start >= filters.from_date)

        if filters.to_date:
            conditions.append(appointments.c.start <= filters.to_date)

        offset = (filters.page - 1) * filters.limit

        async with self.database.session(tier) as db:
            count_stmt = select(func.count()).select_from(appointments).where(and_(*conditions))
            total = (await db.execute(count_stmt)).scalar() or 0

            stmt = (
                _joined_select()
                .where(and_(*conditions))
                .order_by(appointments.c.start.desc())
                .limit(filters.limit)
                .offset(offset)
            )
            result = await db.execute(stmt)
            rows = result.mappings().all()

        return AppointmentListResponse(
            data=[AppointmentResponse.model_validate(dict(row)) for row in rows],
            meta=calculate_pagination(filters.page, filters.limit, total),
        )

    async def get_appointment(
        self,
        tenant_id: UUID,
        appointment_id: UUID,
        tier: CredentialTier = CredentialTier.USER,
    ) -> AppointmentResponse:
        """
        Get appointment by ID with display names.

        Raises:
            NotFoundException: If appointment not found
        """
        async with self.database.session(tier) as db:
            row = await self._get_joined(db, tenant_id, appointment_id)
        return AppointmentResponse.model_validate(row)

    async def update_appointment(
        self,
        tenant_id: UUID,
        appointment_id: UUID,
        data: AppointmentUpdate,
        tier: CredentialTier = CredentialTier.USER,
    ) -> AppointmentResponse:
        """
        Update an appointment.

        Moving the start without an end keeps the current duration. When the
        resulting appointment occupies time, the conflict check runs again,
        ignoring the appointment itself.

        Raises:
            NotFoundException: If appointment not found
            ValidationException: If the resulting interval is empty
            ConflictException: If the new interval is taken
        """
        values = column_values(data, exclude_unset=True)

        async with self.database.session(tier) as db:
            await self.database.pin_isolation(db, tier)
            current = await self._get_joined(db, tenant_id, appointment_id)
            if not values:
                return AppointmentResponse.model_validate(current)

            start = values.get("start", current["start"])
            if "end" in values:
                end = values["end"]
            else:
                end = start + (current["end"] - current["start"])
                if "start" in values:
                    values["end"] = end

            if start >= end:
                message = "start must be before end"
                raise ValidationException(
                    message, errors=[FieldError(field="start", message=message, code="value_error")]
                )

            status = values.get("status", current["status"])
            if status in OCCUPYING_STATUSES:
                conflicts = await find_conflicts(
                    db, current["professional_id"], start, end, exclude_id=appointment_id
                )
                if conflicts:
                    logger.info(
                        "appointment_conflict",
                        appointment_id=str(appointment_id),
                        conflicting_ids=[str(row["id"]) for row in conflicts],
                    )
                    raise ConflictException("Time slot is not available")

            values["updated_at"] = utc_now()

            try:
                await db.execute(
                    update(appointments)
                    .where(appointments.c.id == appointment_id)
                    .values(**values)
                )
                await db.commit()
            except IntegrityError as e:
                await db.rollback()
                raise ConflictException("Time slot is not available") from e
            except DBAPIError as e:
                if _is_serialization_failure(e):
                    raise ConflictException("Time slot is not available") from e
                raise

            row = await self._get_joined(db, tenant_id, appointment_id)

        logger.info("appointment_updated", appointment_id=str(appointment_id))
        if row["status"] != current["status"]:
            await self._notify(tenant_id, row, APPOINTMENT_STATUS_CHANGED)
        return AppointmentResponse.model_validate(row)

    async def update_status(
        self,
        tenant_id: UUID,
        appointment_id: UUID,
        data: AppointmentStatusUpdate,
        tier: CredentialTier = CredentialTier.USER,
    ) -> AppointmentResponse:
        """Change an appointment's status (and optionally its notes)."""
        update_data = AppointmentUpdate(**data.model_dump(exclude_unset=True))
        return await self.update_appointment(tenant_id, appointment_id, update_data, tier)

    async def delete_appointment(
        self,
        tenant_id: UUID,
        appointment_id: UUID,
        tier: CredentialTier = CredentialTier.USER,
    ) -> None:
        """
        Delete an appointment.

        Raises:
            NotFoundException: If appointment not found
        """
        stmt = (
            delete(appointments)
            .where(and_(appointments.c.id == appointment_id, appointments.c.tenant_id == tenant_id))
            .returning(appointments.c.id)
        )

        async with self.database.session(tier) as db:
            result = await db.execute(stmt)
            if result.first() is None:
                raise NotFoundException("Appointment not found")
            await db.commit()

        logger.info("appointment_deleted", appointment_id=str(appointment_id))

    async def check_idempotency(
        self, idempotency_key: str, tier: CredentialTier = CredentialTier.USER
    ) -> AppointmentResponse | None:
        """Appointment previously created with this key, or None."""
        async with self.database.session(tier) as db:
            row = await self._find_by_key(db, idempotency_key)
        return AppointmentResponse.model_validate(row) if row else None

    async def get_conflicting_appointments(
        self,
        professional_id: UUID,
        start: datetime,
        end: datetime,
        exclude_id: UUID | None = None,
        tier: CredentialTier = CredentialTier.USER,
    ) -> list[AppointmentResponse]:
        """Occupying appointments of a professional that intersect [start, end)."""
        async with self.database.session(tier) as db:
            rows = await find_conflicts(db, professional_id, start, end, exclude_id)
        return [AppointmentResponse.model_validate(row) for row in rows]

    async def _find_by_key(self, db: AsyncSession, idempotency_key: str) -> dict | None:
        result = await db.execute(
            _joined_select().where(appointments.c.idempotency_key == idempotency_key)
        )
        row = result.mappings().first()
        return dict(row) if row else None

    def _replay(self, tenant_id: UUID, existing: dict) -> AppointmentResponse:
        """Answer a repeated request with the appointment it created before."""
        if existing["tenant_id"] != tenant_id:
            raise ConflictException("Idempotency key already used")
        logger.info(
            "idempotent_replay",
            appointment_id=str(existing["id"]),
            idempotency_key=existing["idempotency_key"],
        )
        return AppointmentResponse.model_validate(existing)

    async def _get_joined(self, db: AsyncSession, tenant_id: UUID, appointment_id: UUID) -> dict:
        result = await db.execute(
            _joined_select().where(
                and_(appointments.c.id == appointment_id, appointments.c.tenant_id == tenant_id)
            )
        )
        row = result.mappings().first()
        if not row:
            raise NotFoundException("Appointment not found")
        return dict(row)

    async def _resolve_customer(
        self, db: AsyncSession, tenant_id: UUID, data: AppointmentCreate
    ) -> UUID:
        """Existing customer id, or the customer found or created from inline data."""
        if data.customer_id is not None:
            result = await db.execute(
                select(customers.c.id).where(
                    and_(customers.c.id == data.customer_id, customers.c.tenant_id == tenant_id)
                )
            )
            if result.first() is None:
                raise NotFoundException("Customer not found")
            return data.customer_id

        existing = await find_customer_by_email(db, tenant_id, data.customer_data.email)
        if existing:
            return existing["id"]

        row = await insert_customer(
            db, tenant_id, CustomerCreate(**data.customer_data.model_dump())
        )
        return row["id"]

    async def _notify(self, tenant_id: UUID, row: dict, template_code: str) -> None:
        """Queue a customer notification; failures never fail the booking."""
        if self.settings is not None and not self.settings.enable_notifications:
            return

        try:
            await self.notifications.queue_appointment_notification(
                tenant_id,
                row,
                template_code,
                timezone=row.get("unit_timezone") or "UTC",
                currency=self.settings.currency if self.settings else "BRL",
            )
        except Exception as e:
            logger.warning(
                "notification_queue_failed",
                appointment_id=str(row["id"]),
                error=str(e),
            )
