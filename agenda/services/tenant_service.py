"""Tenant service for business logic."""

from uuid import UUID

import structlog
from sqlalchemy import insert, select, update

from agenda.core.exceptions import NotFoundException
from agenda.database import CredentialTier, Database
from agenda.models import tenants
from agenda.models.base import utc_now
from agenda.schemas.common import column_values
from agenda.schemas.tenants import TenantCreate, TenantResponse, TenantUpdate

logger = structlog.get_logger()


class TenantService:
    """Service for managing tenants (privileged operations)."""

    def __init__(self, database: Database):
        """Initialize service with the storage handle."""
        self.database = database

    async def create_tenant(
        self, data: TenantCreate, tier: CredentialTier = CredentialTier.SERVICE
    ) -> TenantResponse:
        """
        Create a new tenant.

        Args:
            data: Tenant creation data
            tier: Credential tier to run under

        Returns:
            Created tenant
        """
        async with self.database.session(tier) as db:
            stmt = insert(tenants).values(**column_values(data)).returning(tenants)
            result = await db.execute(stmt)
            row = result.mappings().one()
            await db.commit()

        logger.info("tenant_created", tenant_id=str(row["id"]))
        return TenantResponse.model_validate(dict(row))

    async def get_tenant(
        self, tenant_id: UUID, tier: CredentialTier = CredentialTier.USER
    ) -> TenantResponse:
        """
        Get tenant by ID.

        Raises:
            NotFoundException: If tenant not found
        """
        async with self.database.session(tier) as db:
            result = await db.execute(select(tenants).where(tenants.c.id == tenant_id))
            row = result.mappings().first()

        if not row:
            raise NotFoundException("Tenant not found")

        return TenantResponse.model_validate(dict(row))

    async def update_tenant(
        self,
        tenant_id: UUID,
        data: TenantUpdate,
        tier: CredentialTier = CredentialTier.SERVICE,
    ) -> TenantResponse:
        """
        Update tenant fields that were explicitly provided.

        Raises:
            NotFoundException: If tenant not found
        """
        values = column_values(data, exclude_unset=True)
        if not values:
            return await self.get_tenant(tenant_id, tier)

        values["updated_at"] = utc_now()

        async with self.database.session(tier) as db:
            stmt = (
                update(tenants)
                .where(tenants.c.id == tenant_id)
                .values(**values)
                .returning(tenants)
            )
            result = await db.execute(stmt)
            row = result.mappings().first()
            if not row:
                raise NotFoundException("Tenant not found")
            await db.commit()

        return TenantResponse.model_validate(dict(row))
