"""Appointment reporting."""

from datetime import timedelta
from uuid import UUID

from sqlalchemy import and_, select

from agenda.database import CredentialTier, Database
from agenda.models import appointments
from agenda.schemas.reports import AppointmentReport, ReportFilters
from agenda.utils.collections import count_by
from agenda.utils.dates import from_utc, local_day_bounds


class ReportService:
    """Service for aggregate appointment reports."""

    def __init__(self, database: Database, timezone: str = "UTC"):
        """
        Initialize service.

        Args:
            database: Storage handle
            timezone: Zone whose calendar days the report's dates refer to
        """
        self.database = database
        self.timezone = timezone

    async def get_appointment_report(
        self,
        tenant_id: UUID,
        filters: ReportFilters,
        tier: CredentialTier = CredentialTier.USER,
    ) -> AppointmentReport:
        """
        Count appointments starting within [from, to] (whole days, inclusive).

        Returns:
            Totals by status, professional, unit and local start date
        """
        range_start, _ = local_day_bounds(filters.from_date, self.timezone)
        range_end, _ = local_day_bounds(filters.to_date + timedelta(days=1), self.timezone)

        conditions = [
            appointments.c.tenant_id == tenant_id,
            appointments.c.start >= range_start,
            appointments.c.start < range_end,
        ]

        if filters.unit_id:
            conditions.append(appointments.c.unit_id == filters.unit_id)

        if filters.professional_id:
            conditions.append(appointments.c.professional_id == filters.professional_id)

        if filters.status:
            conditions.append(appointments.c.status == filters.status.value)

        stmt = select(
            appointments.c.start,
            appointments.c.status,
            appointments.c.professional_id,
            appointments.c.unit_id,
        ).where(and_(*conditions))

        async with self.database.session(tier) as db:
            result = await db.execute(stmt)
            rows = [dict(row) for row in result.mappings().all()]

        for row in rows:
            row["date"] = from_utc(row["start"], self.timezone).date().isoformat()

        return AppointmentReport(
            total=len(rows),
            by_status=count_by(rows, "status"),
            by_professional=count_by(rows, "professional_id"),
            by_unit=count_by(rows, "unit_id"),
            by_date=count_by(rows, "date"),
        )
