"""Service catalog (bookable services) business logic."""

from uuid import UUID

from sqlalchemy import and_, delete, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from agenda.core.exceptions import NotFoundException
from agenda.database import CredentialTier, Database
from agenda.models import services
from agenda.models.base import utc_now
from agenda.schemas.common import column_values
from agenda.schemas.services import ServiceCreate, ServiceResponse, ServiceUpdate


async def ensure_service(db: AsyncSession, tenant_id: UUID, service_id: UUID) -> dict:
    """Load a service row of the tenant or raise NotFoundException."""
    result = await db.execute(
        select(services).where(and_(services.c.id == service_id, services.c.tenant_id == tenant_id))
    )
    row = result.mappings().first()
    if not row:
        raise NotFoundException("Service not found")
    return dict(row)


class CatalogService:
    """Service for managing what a tenant offers for booking."""

    def __init__(self, database: Database):
        """Initialize service with the storage handle."""
        self.database = database

    async def create_service(
        self,
        tenant_id: UUID,
        data: ServiceCreate,
        tier: CredentialTier = CredentialTier.USER,
    ) -> ServiceResponse:
        """Create a bookable service."""
        values = column_values(data)
        values["tenant_id"] = tenant_id

        async with self.database.session(tier) as db:
            result = await db.execute(insert(services).values(**values).returning(services))
            row = result.mappings().one()
            await db.commit()

        return ServiceResponse.model_validate(dict(row))

    async def list_services(
        self, tenant_id: UUID, tier: CredentialTier = CredentialTier.USER
    ) -> list[ServiceResponse]:
        """List the tenant's active services ordered by name."""
        stmt = (
            select(services)
            .where(and_(services.c.tenant_id == tenant_id, services.c.active.is_(True)))
            .order_by(services.c.name)
        )

        async with self.database.session(tier) as db:
            result = await db.execute(stmt)
            rows = result.mappings().all()

        return [ServiceResponse.model_validate(dict(row)) for row in rows]

    async def get_service(
        self,
        tenant_id: UUID,
        service_id: UUID,
        tier: CredentialTier = CredentialTier.USER,
    ) -> ServiceResponse:
        """Get a service of the tenant."""
        async with self.database.session(tier) as db:
            row = await ensure_service(db, tenant_id, service_id)
        return ServiceResponse.model_validate(row)

    async def update_service(
        self,
        tenant_id: UUID,
        service_id: UUID,
        data: ServiceUpdate,
        tier: CredentialTier = CredentialTier.USER,
    ) -> ServiceResponse:
        """Update a service's provided fields."""
        values = column_values(data, exclude_unset=True)
        if not values:
            return await self.get_service(tenant_id, service_id, tier)

        values["updated_at"] = utc_now()
        stmt = (
            update(services)
            .where(and_(services.c.id == service_id, services.c.tenant_id == tenant_id))
            .values(**values)
            .returning(services)
        )

        async with self.database.session(tier) as db:
            result = await db.execute(stmt)
            row = result.mappings().first()
            if not row:
                raise NotFoundException("Service not found")
            await db.commit()

        return ServiceResponse.model_validate(dict(row))

    async def delete_service(
        self,
        tenant_id: UUID,
        service_id: UUID,
        tier: CredentialTier = CredentialTier.USER,
    ) -> None:
        """Delete a service."""
        stmt = (
            delete(services)
            .where(and_(services.c.id == service_id, services.c.tenant_id == tenant_id))
            .returning(services.c.id)
        )

        async with self.database.session(tier) as db:
            result = await db.execute(stmt)
            if result.first() is None:
                raise NotFoundException("Service not found")
            await db.commit()
