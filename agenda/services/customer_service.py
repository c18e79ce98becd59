"""Customer service for business logic."""

from uuid import UUID

import structlog
from sqlalchemy import and_, delete, func, insert, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from agenda.core.exceptions import ConflictException, NotFoundException
from agenda.database import CredentialTier, Database
from agenda.models import customers
from agenda.models.base import utc_now
from agenda.schemas.common import PaginationParams, column_values
from agenda.schemas.customers import (
    CustomerCreate,
    CustomerListResponse,
    CustomerResponse,
    CustomerUpdate,
)
from agenda.utils.pagination import calculate_pagination

logger = structlog.get_logger()


async def find_customer_by_email(db: AsyncSession, tenant_id: UUID, email: str) -> dict | None:
    """Customer row with this email within the tenant, or None."""
    stmt = select(customers).where(
        and_(customers.c.tenant_id == tenant_id, customers.c.email == email)
    )
    result = await db.execute(stmt)
    row = result.mappings().first()
    return dict(row) if row else None


async def insert_customer(db: AsyncSession, tenant_id: UUID, data: CustomerCreate) -> dict:
    """Insert a customer row in the session's transaction (no commit)."""
    values = column_values(data)
    values["tenant_id"] = tenant_id
    result = await db.execute(insert(customers).values(**values).returning(customers))
    return dict(result.mappings().one())


class CustomerService:
    """Service for managing a tenant's customers."""

    def __init__(self, database: Database):
        """Initialize service with the storage handle."""
        self.database = database

    async def create_customer(
        self,
        tenant_id: UUID,
        data: CustomerCreate,
        tier: CredentialTier = CredentialTier.USER,
    ) -> CustomerResponse:
        """
        Create a customer.

        Raises:
            ConflictException: If the tenant already has a customer with this email
        """
        async with self.database.session(tier) as db:
            if await find_customer_by_email(db, tenant_id, data.email):
                raise ConflictException("Customer with this email already exists")
            row = await insert_customer(db, tenant_id, data)
            await db.commit()

        logger.info("customer_created", customer_id=str(row["id"]), tenant_id=str(tenant_id))
        return CustomerResponse.model_validate(row)

    async def list_customers(
        self,
        tenant_id: UUID,
        params: PaginationParams,
        tier: CredentialTier = CredentialTier.USER,
    ) -> CustomerListResponse:
        """
        List customers with optional search and pagination.

        Args:
            tenant_id: Owning tenant
            params: Page, limit and an optional case-insensitive search
                term matched against name and email
            tier: Credential tier to run under

        Returns:
            Paginated customers ordered by name
        """
        conditions = [customers.c.tenant_id == tenant_id]

        if params.search:
            pattern = f"%{params.search}%"
            conditions.append(
                or_(customers.c.name.ilike(pattern), customers.c.email.ilike(pattern))
            )

        order = customers.c.name.desc() if params.sort_order == "desc" else customers.c.name.asc()

        async with self.database.session(tier) as db:
            count_stmt = select(func.count()).select_from(customers).where(and_(*conditions))
            total = (await db.execute(count_stmt)).scalar() or 0

            stmt = (
                select(customers)
                .where(and_(*conditions))
                .order_by(order)
                .limit(params.limit)
                .offset(params.offset)
            )
            result = await db.execute(stmt)
            rows = result.mappings().all()

        return CustomerListResponse(
            data=[CustomerResponse.model_validate(dict(row)) for row in rows],
            meta=calculate_pagination(params.page, params.limit, total),
        )

    async def get_customer(
        self,
        tenant_id: UUID,
        customer_id: UUID,
        tier: CredentialTier = CredentialTier.USER,
    ) -> CustomerResponse:
        """
        Get a customer of the tenant.

        Raises:
            NotFoundException: If customer not found
        """
        stmt = select(customers).where(
            and_(customers.c.id == customer_id, customers.c.tenant_id == tenant_id)
        )

        async with self.database.session(tier) as db:
            result = await db.execute(stmt)
            row = result.mappings().first()

        if not row:
            raise NotFoundException("Customer not found")

        return CustomerResponse.model_validate(dict(row))

    async def get_customer_by_email(
        self,
        tenant_id: UUID,
        email: str,
        tier: CredentialTier = CredentialTier.USER,
    ) -> CustomerResponse | None:
        """Get a customer by email within the tenant, or None."""
        async with self.database.session(tier) as db:
            row = await find_customer_by_email(db, tenant_id, email)
        return CustomerResponse.model_validate(row) if row else None

    async def update_customer(
        self,
        tenant_id: UUID,
        customer_id: UUID,
        data: CustomerUpdate,
        tier: CredentialTier = CredentialTier.USER,
    ) -> CustomerResponse:
        """Update a customer's provided fields."""
        values = column_values(data, exclude_unset=True)
        if not values:
            return await self.get_customer(tenant_id, customer_id, tier)

        values["updated_at"] = utc_now()
        stmt = (
            update(customers)
            .where(and_(customers.c.id == customer_id, customers.c.tenant_id == tenant_id))
            .values(**values)
            .returning(customers)
        )

        async with self.database.session(tier) as db:
            result = await db.execute(stmt)
            row = result.mappings().first()
            if not row:
                raise NotFoundException("Customer not found")
            await db.commit()

        return CustomerResponse.model_validate(dict(row))

    async def delete_customer(
        self,
        tenant_id: UUID,
        customer_id: UUID,
        tier: CredentialTier = CredentialTier.USER,
    ) -> None:
        """Delete a customer."""
        stmt = (
            delete(customers)
            .where(and_(customers.c.id == customer_id, customers.c.tenant_id == tenant_id))
            .returning(customers.c.id)
        )

        async with self.database.session(tier) as db:
            result = await db.execute(stmt)
            if result.first() is None:
                raise NotFoundException("Customer not found")
            await db.commit()
