"""Unit service for business logic."""

from uuid import UUID

from sqlalchemy import and_, delete, insert, select, update

from agenda.core.exceptions import NotFoundException
from agenda.database import CredentialTier, Database
from agenda.models import units
from agenda.models.base import utc_now
from agenda.schemas.common import column_values
from agenda.schemas.units import UnitCreate, UnitResponse, UnitUpdate


class UnitService:
    """Service for managing a tenant's units."""

    def __init__(self, database: Database):
        """Initialize service with the storage handle."""
        self.database = database

    async def create_unit(
        self,
        tenant_id: UUID,
        data: UnitCreate,
        tier: CredentialTier = CredentialTier.USER,
    ) -> UnitResponse:
        """Create a unit for a tenant."""
        values = column_values(data)
        values["tenant_id"] = tenant_id

        async with self.database.session(tier) as db:
            result = await db.execute(insert(units).values(**values).returning(units))
            row = result.mappings().one()
            await db.commit()

        return UnitResponse.model_validate(dict(row))

    async def list_units(
        self, tenant_id: UUID, tier: CredentialTier = CredentialTier.USER
    ) -> list[UnitResponse]:
        """List a tenant's units ordered by name."""
        stmt = select(units).where(units.c.tenant_id == tenant_id).order_by(units.c.name)

        async with self.database.session(tier) as db:
            result = await db.execute(stmt)
            rows = result.mappings().all()

        return [UnitResponse.model_validate(dict(row)) for row in rows]

    async def get_unit(
        self,
        tenant_id: UUID,
        unit_id: UUID,
        tier: CredentialTier = CredentialTier.USER,
    ) -> UnitResponse:
        """
        Get a unit of the tenant.

        Raises:
            NotFoundException: If the unit does not exist in this tenant
        """
        stmt = select(units).where(and_(units.c.id == unit_id, units.c.tenant_id == tenant_id))

        async with self.database.session(tier) as db:
            result = await db.execute(stmt)
            row = result.mappings().first()

        if not row:
            raise NotFoundException("Unit not found")

        return UnitResponse.model_validate(dict(row))

    async def update_unit(
        self,
        tenant_id: UUID,
        unit_id: UUID,
        data: UnitUpdate,
        tier: CredentialTier = CredentialTier.USER,
    ) -> UnitResponse:
        """Update a unit's provided fields."""
        values = column_values(data, exclude_unset=True)
        if not values:
            return await self.get_unit(tenant_id, unit_id, tier)

        values["updated_at"] = utc_now()
        stmt = (
            update(units)
            .where(and_(units.c.id == unit_id, units.c.tenant_id == tenant_id))
            .values(**values)
            .returning(units)
        )

        async with self.database.session(tier) as db:
            result = await db.execute(stmt)
            row = result.mappings().first()
            if not row:
                raise NotFoundException("Unit not found")
            await db.commit()

        return UnitResponse.model_validate(dict(row))

    async def delete_unit(
        self,
        tenant_id: UUID,
        unit_id: UUID,
        tier: CredentialTier = CredentialTier.USER,
    ) -> None:
        """Delete a unit."""
        stmt = (
            delete(units)
            .where(and_(units.c.id == unit_id, units.c.tenant_id == tenant_id))
            .returning(units.c.id)
        )

        async with self.database.session(tier) as db:
            result = await db.execute(stmt)
            if result.first() is None:
                raise NotFoundException("Unit not found")
            await db.commit()
