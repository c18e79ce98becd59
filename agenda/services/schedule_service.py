"""Schedule rules and time off for professionals' calendars."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import and_, delete, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from agenda.core.exceptions import FieldError, NotFoundException, ValidationException
from agenda.database import CredentialTier, Database
from agenda.models import schedule_rules, time_off
from agenda.models.base import utc_now
from agenda.scheduling import overlap_clause
from agenda.schemas.common import column_values
from agenda.schemas.schedule import (
    ScheduleRuleCreate,
    ScheduleRuleResponse,
    ScheduleRuleUpdate,
    TimeOffCreate,
    TimeOffResponse,
    TimeOffUpdate,
)
from agenda.services.professional_service import ensure_professional


def _invalid_window(field: str, message: str) -> ValidationException:
    error = FieldError(field=field, message=message, code="value_error")
    return ValidationException(message, errors=[error])


class ScheduleService:
    """
    Service for recurring availability rules and blocked intervals.

    A calendar is identified by its professional's id.
    """

    def __init__(self, database: Database):
        """Initialize service with the storage handle."""
        self.database = database

    # Schedule rules

    async def create_rule(
        self,
        tenant_id: UUID,
        calendar_id: UUID,
        data: ScheduleRuleCreate,
        tier: CredentialTier = CredentialTier.USER,
    ) -> ScheduleRuleResponse:
        """Add a weekly availability window to a calendar."""
        values = column_values(data)
        values["calendar_id"] = calendar_id

        async with self.database.session(tier) as db:
            await ensure_professional(db, tenant_id, calendar_id)
            result = await db.execute(
                insert(schedule_rules).values(**values).returning(schedule_rules)
            )
            row = result.mappings().one()
            await db.commit()

        return ScheduleRuleResponse.model_validate(dict(row))

    async def list_rules(
        self,
        tenant_id: UUID,
        calendar_id: UUID,
        tier: CredentialTier = CredentialTier.USER,
    ) -> list[ScheduleRuleResponse]:
        """List a calendar's rules ordered by day of week."""
        stmt = (
            select(schedule_rules)
            .where(schedule_rules.c.calendar_id == calendar_id)
            .order_by(schedule_rules.c.day_of_week, schedule_rules.c.start_time)
        )

        async with self.database.session(tier) as db:
            await ensure_professional(db, tenant_id, calendar_id)
            result = await db.execute(stmt)
            rows = result.mappings().all()

        return [ScheduleRuleResponse.model_validate(dict(row)) for row in rows]

    async def update_rule(
        self,
        tenant_id: UUID,
        calendar_id: UUID,
        rule_id: UUID,
        data: ScheduleRuleUpdate,
        tier: CredentialTier = CredentialTier.USER,
    ) -> ScheduleRuleResponse:
        """
        Update a rule's provided fields.

        Raises:
            NotFoundException: If the rule is not on this calendar
            ValidationException: If the resulting window is empty
        """
        values = column_values(data, exclude_unset=True)

        async with self.database.session(tier) as db:
            await ensure_professional(db, tenant_id, calendar_id)
            current = await self._get_rule(db, calendar_id, rule_id)
            if not values:
                return ScheduleRuleResponse.model_validate(current)

            start_time = values.get("start_time", current["start_time"])
            end_time = values.get("end_time", current["end_time"])
            if start_time >= end_time:
                raise _invalid_window("start_time", "start_time must be before end_time")

            values["updated_at"] = utc_now()
            result = await db.execute(
                update(schedule_rules)
                .where(schedule_rules.c.id == rule_id)
                .values(**values)
                .returning(schedule_rules)
            )
            row = result.mappings().one()
            await db.commit()

        return ScheduleRuleResponse.model_validate(dict(row))

    async def delete_rule(
        self,
        tenant_id: UUID,
        calendar_id: UUID,
        rule_id: UUID,
        tier: CredentialTier = CredentialTier.USER,
    ) -> None:
        """Delete a rule."""
        async with self.database.session(tier) as db:
            await ensure_professional(db, tenant_id, calendar_id)
            await self._get_rule(db, calendar_id, rule_id)
            await db.execute(delete(schedule_rules).where(schedule_rules.c.id == rule_id))
            await db.commit()

    async def _get_rule(self, db: AsyncSession, calendar_id: UUID, rule_id: UUID) -> dict:
        result = await db.execute(
            select(schedule_rules).where(
                and_(schedule_rules.c.id == rule_id, schedule_rules.c.calendar_id == calendar_id)
            )
        )
        row = result.mappings().first()
        if not row:
            raise NotFoundException("Schedule rule not found")
        return dict(row)

    # Time off

    async def create_time_off(
        self,
        tenant_id: UUID,
        calendar_id: UUID,
        data: TimeOffCreate,
        tier: CredentialTier = CredentialTier.USER,
    ) -> TimeOffResponse:
        """Block an interval on a calendar."""
        values = column_values(data)
        values["calendar_id"] = calendar_id

        async with self.database.session(tier) as db:
            await ensure_professional(db, tenant_id, calendar_id)
            result = await db.execute(insert(time_off).values(**values).returning(time_off))
            row = result.mappings().one()
            await db.commit()

        return TimeOffResponse.model_validate(dict(row))

    async def list_time_off(
        self,
        tenant_id: UUID,
        calendar_id: UUID,
        start: datetime | None = None,
        end: datetime | None = None,
        tier: CredentialTier = CredentialTier.USER,
    ) -> list[TimeOffResponse]:
        """
        List a calendar's time off ordered by start.

        Args:
            tenant_id: Owning tenant
            calendar_id: Calendar (professional) id
            start: Keep only entries ending after this moment
            end: Keep only entries starting before this moment; with both,
                the entries intersecting [start, end)
            tier: Credential tier to run under

        Returns:
            Matching time-off entries
        """
        conditions = [time_off.c.calendar_id == calendar_id]
        if start is not None and end is not None:
            conditions.append(overlap_clause(time_off.c.start, time_off.c.end, start, end))
        elif start is not None:
            conditions.append(time_off.c.end > start)
        elif end is not None:
            conditions.append(time_off.c.start < end)

        stmt = select(time_off).where(and_(*conditions)).order_by(time_off.c.start)

        async with self.database.session(tier) as db:
            await ensure_professional(db, tenant_id, calendar_id)
            result = await db.execute(stmt)
            rows = result.mappings().all()

        return [TimeOffResponse.model_validate(dict(row)) for row in rows]

    async def update_time_off(
        self,
        tenant_id: UUID,
        calendar_id: UUID,
        time_off_id: UUID,
        data: TimeOffUpdate,
        tier: CredentialTier = CredentialTier.USER,
    ) -> TimeOffResponse:
        """Update a time-off entry's provided fields."""
        values = column_values(data, exclude_unset=True)

        async with self.database.session(tier) as db:
            await ensure_professional(db, tenant_id, calendar_id)
            current = await self._get_time_off(db, calendar_id, time_off_id)
            if not values:
                return TimeOffResponse.model_validate(current)

            if values.get("start", current["start"]) >= values.get("end", current["end"]):
                raise _invalid_window("start", "start must be before end")

            values["updated_at"] = utc_now()
            result = await db.execute(
                update(time_off)
                .where(time_off.c.id == time_off_id)
                .values(**values)
                .returning(time_off)
            )
            row = result.mappings().one()
            await db.commit()

        return TimeOffResponse.model_validate(dict(row))

    async def delete_time_off(
        self,
        tenant_id: UUID,
        calendar_id: UUID,
        time_off_id: UUID,
        tier: CredentialTier = CredentialTier.USER,
    ) -> None:
        """Delete a time-off entry."""
        async with self.database.session(tier) as db:
            await ensure_professional(db, tenant_id, calendar_id)
            await self._get_time_off(db, calendar_id, time_off_id)
            await db.execute(delete(time_off).where(time_off.c.id == time_off_id))
            await db.commit()

    async def _get_time_off(self, db: AsyncSession, calendar_id: UUID, time_off_id: UUID) -> dict:
        result = await db.execute(
            select(time_off).where(
                and_(time_off.c.id == time_off_id, time_off.c.calendar_id == calendar_id)
            )
        )
        row = result.mappings().first()
        if not row:
            raise NotFoundException("Time off not found")
        return dict(row)
