"""Availability computation over rules, time off and bookings."""

from uuid import UUID

import structlog
from sqlalchemy import and_, select

from agenda.core.exceptions import NotFoundException
from agenda.database import CredentialTier, Database
from agenda.models import OCCUPYING_STATUSES, appointments, professionals, schedule_rules, time_off
from agenda.scheduling import Interval, Rule, generate_slots, overlap_clause, resolve_availability
from agenda.schemas.availability import AvailabilityRequest, AvailabilityResponse, AvailabilitySlot
from agenda.services.catalog_service import ensure_service
from agenda.services.professional_service import ensure_professional, ensure_unit
from agenda.utils.collections import group_by
from agenda.utils.dates import local_day_bounds

logger = structlog.get_logger()


class AvailabilityService:
    """Service answering "which slots can be booked on this day"."""

    def __init__(self, database: Database):
        """Initialize service with the storage handle."""
        self.database = database

    async def get_availability(
        self,
        tenant_id: UUID,
        request: AvailabilityRequest,
        tier: CredentialTier = CredentialTier.USER,
    ) -> AvailabilityResponse:
        """
        Compute slot availability for a unit, service and local day.

        Slots are generated from each active professional's rules in the
        unit's timezone and are as wide as the service. A slot is unavailable
        when it intersects time off or an occupying appointment of its
        professional.

        Args:
            tenant_id: Owning tenant
            request: Unit, service, local date and optional professional
            tier: Credential tier to run under

        Returns:
            Slots of every eligible professional, sorted by start then professional

        Raises:
            NotFoundException: If the unit, service or professional is not
                found in this tenant
        """
        async with self.database.session(tier) as db:
            unit = await ensure_unit(db, tenant_id, request.unit_id)
            service = await ensure_service(db, tenant_id, request.service_id)
            timezone = unit["timezone"]

            if request.professional_id is not None:
                professional = await ensure_professional(db, tenant_id, request.professional_id)
                if professional["unit_id"] != request.unit_id or not professional["active"]:
                    raise NotFoundException("Professional not found")
                professional_ids = [professional["id"]]
            else:
                result = await db.execute(
                    select(professionals.c.id).where(
                        and_(
                            professionals.c.unit_id == request.unit_id,
                            professionals.c.active.is_(True),
                        )
                    )
                )
                professional_ids = list(result.scalars().all())

            if not professional_ids:
                return AvailabilityResponse(
                    date=request.date,
                    unit_id=request.unit_id,
                    service_id=request.service_id,
                    timezone=timezone,
                    slots=[],
                )

            day_start, day_end = local_day_bounds(request.date, timezone)

            rules_result = await db.execute(
                select(schedule_rules).where(schedule_rules.c.calendar_id.in_(professional_ids))
            )
            rules = [dict(row) for row in rules_result.mappings().all()]

            off_result = await db.execute(
                select(time_off.c.calendar_id, time_off.c.start, time_off.c.end).where(
                    and_(
                        time_off.c.calendar_id.in_(professional_ids),
                        overlap_clause(time_off.c.start, time_off.c.end, day_start, day_end),
                    )
                )
            )
            blocked = [
                {"calendar_id": row["calendar_id"], "start": row["start"], "end": row["end"]}
                for row in off_result.mappings().all()
            ]

            booked_result = await db.execute(
                select(appointments.c.professional_id, appointments.c.start, appointments.c.end)
                .where(
                    and_(
                        appointments.c.professional_id.in_(professional_ids),
                        appointments.c.status.in_(OCCUPYING_STATUSES),
                        overlap_clause(
                            appointments.c.start, appointments.c.end, day_start, day_end
                        ),
                    )
                )
            )
            blocked.extend(
                {"calendar_id": row["professional_id"], "start": row["start"], "end": row["end"]}
                for row in booked_result.mappings().all()
            )

        rules_by_calendar = group_by(rules, "calendar_id")
        blocked_by_calendar = group_by(blocked, "calendar_id")

        slots: list[AvailabilitySlot] = []
        for professional_id in professional_ids:
            calendar_rules = [
                Rule(
                    day_of_week=row["day_of_week"],
                    start_time=row["start_time"],
                    end_time=row["end_time"],
                    slot_minutes=row["slot_minutes"],
                )
                for row in rules_by_calendar.get(str(professional_id), [])
            ]
            candidates = generate_slots(
                calendar_rules, request.date, timezone, service["duration_minutes"]
            )
            exclusions = [
                Interval(row["start"], row["end"])
                for row in blocked_by_calendar.get(str(professional_id), [])
            ]
            for entry in resolve_availability(candidates, exclusions, professional_id):
                slots.append(
                    AvailabilitySlot(
                        start=entry.slot.start,
                        end=entry.slot.end,
                        available=entry.available,
                        professional_id=entry.professional_id,
                    )
                )

        slots.sort(key=lambda slot: (slot.start, str(slot.professional_id)))

        logger.debug(
            "availability_computed",
            unit_id=str(request.unit_id),
            date=request.date.isoformat(),
            professionals=len(professional_ids),
            slots=len(slots),
        )

        return AvailabilityResponse(
            date=request.date,
            unit_id=request.unit_id,
            service_id=request.service_id,
            timezone=timezone,
            slots=slots,
        )
