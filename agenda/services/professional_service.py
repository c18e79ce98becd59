"""Professional service for business logic."""

from uuid import UUID

from sqlalchemy import and_, delete, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from agenda.core.exceptions import NotFoundException
from agenda.database import CredentialTier, Database
from agenda.models import professionals, units
from agenda.models.base import utc_now
from agenda.schemas.common import column_values
from agenda.schemas.professionals import (
    ProfessionalCreate,
    ProfessionalResponse,
    ProfessionalUpdate,
)


async def ensure_professional(db: AsyncSession, tenant_id: UUID, professional_id: UUID) -> dict:
    """
    Load a professional row, checking its unit belongs to the tenant.

    Raises:
        NotFoundException: If the professional is missing or foreign
    """
    stmt = (
        select(professionals)
        .join(units, units.c.id == professionals.c.unit_id)
        .where(and_(professionals.c.id == professional_id, units.c.tenant_id == tenant_id))
    )
    result = await db.execute(stmt)
    row = result.mappings().first()
    if not row:
        raise NotFoundException("Professional not found")
    return dict(row)


async def ensure_unit(db: AsyncSession, tenant_id: UUID, unit_id: UUID) -> dict:
    """Load a unit row of the tenant or raise NotFoundException."""
    result = await db.execute(
        select(units).where(and_(units.c.id == unit_id, units.c.tenant_id == tenant_id))
    )
    row = result.mappings().first()
    if not row:
        raise NotFoundException("Unit not found")
    return dict(row)


class ProfessionalService:
    """Service for managing professionals (each owns one calendar)."""

    def __init__(self, database: Database):
        """Initialize service with the storage handle."""
        self.database = database

    async def create_professional(
        self,
        tenant_id: UUID,
        data: ProfessionalCreate,
        tier: CredentialTier = CredentialTier.USER,
    ) -> ProfessionalResponse:
        """
        Create a professional in one of the tenant's units.

        Raises:
            NotFoundException: If the unit does not belong to the tenant
        """
        async with self.database.session(tier) as db:
            await ensure_unit(db, tenant_id, data.unit_id)
            result = await db.execute(
                insert(professionals).values(**column_values(data)).returning(professionals)
            )
            row = result.mappings().one()
            await db.commit()

        return ProfessionalResponse.model_validate(dict(row))

    async def list_professionals(
        self,
        tenant_id: UUID,
        unit_id: UUID,
        tier: CredentialTier = CredentialTier.USER,
    ) -> list[ProfessionalResponse]:
        """List the active professionals of a unit ordered by name."""
        stmt = (
            select(professionals)
            .join(units, units.c.id == professionals.c.unit_id)
            .where(
                and_(
                    professionals.c.unit_id == unit_id,
                    units.c.tenant_id == tenant_id,
                    professionals.c.active.is_(True),
                )
            )
            .order_by(professionals.c.name)
        )

        async with self.database.session(tier) as db:
            result = await db.execute(stmt)
            rows = result.mappings().all()

        return [ProfessionalResponse.model_validate(dict(row)) for row in rows]

    async def get_professional(
        self,
        tenant_id: UUID,
        professional_id: UUID,
        tier: CredentialTier = CredentialTier.USER,
    ) -> ProfessionalResponse:
        """Get a professional of the tenant."""
        async with self.database.session(tier) as db:
            row = await ensure_professional(db, tenant_id, professional_id)
        return ProfessionalResponse.model_validate(row)

    async def update_professional(
        self,
        tenant_id: UUID,
        professional_id: UUID,
        data: ProfessionalUpdate,
        tier: CredentialTier = CredentialTier.USER,
    ) -> ProfessionalResponse:
        """Update a professional's provided fields."""
        values = column_values(data, exclude_unset=True)

        async with self.database.session(tier) as db:
            current = await ensure_professional(db, tenant_id, professional_id)
            if not values:
                return ProfessionalResponse.model_validate(current)

            values["updated_at"] = utc_now()
            result = await db.execute(
                update(professionals)
                .where(professionals.c.id == professional_id)
                .values(**values)
                .returning(professionals)
            )
            row = result.mappings().one()
            await db.commit()

        return ProfessionalResponse.model_validate(dict(row))

    async def delete_professional(
        self,
        tenant_id: UUID,
        professional_id: UUID,
        tier: CredentialTier = CredentialTier.USER,
    ) -> None:
        """Delete a professional."""
        async with self.database.session(tier) as db:
            await ensure_professional(db, tenant_id, professional_id)
            await db.execute(delete(professionals).where(professionals.c.id == professional_id))
            await db.commit()
