"""User service for business logic."""

from uuid import UUID

import structlog
from sqlalchemy import and_, delete, insert, select, update

from agenda.core.exceptions import ConflictException, NotFoundException
from agenda.core.security import hash_password
from agenda.database import CredentialTier, Database
from agenda.models import users
from agenda.models.base import utc_now
from agenda.schemas.common import column_values
from agenda.schemas.users import UserCreate, UserResponse, UserUpdate

logger = structlog.get_logger()


class UserService:
    """Service for managing staff users."""

    def __init__(self, database: Database):
        """Initialize service with the storage handle."""
        self.database = database

    async def create_user(
        self,
        tenant_id: UUID,
        data: UserCreate,
        tier: CredentialTier = CredentialTier.USER,
    ) -> UserResponse:
        """
        Create a staff user.

        The password, when given, is stored only as a bcrypt hash. ``data.id``
        lets the caller reuse the auth backend's identity id.

        Raises:
            ConflictException: If the email is already registered
        """
        values = column_values(data, exclude={"password", "id"})
        values["tenant_id"] = tenant_id
        if data.id is not None:
            values["id"] = data.id
        if data.password:
            values["password_hash"] = hash_password(data.password)

        async with self.database.session(tier) as db:
            existing = await db.execute(select(users.c.id).where(users.c.email == data.email))
            if existing.first() is not None:
                raise ConflictException("User with this email already exists")

            result = await db.execute(insert(users).values(**values).returning(users))
            row = result.mappings().one()
            await db.commit()

        logger.info("user_created", user_id=str(row["id"]), tenant_id=str(tenant_id))
        return UserResponse.model_validate(dict(row))

    async def list_users(
        self, tenant_id: UUID, tier: CredentialTier = CredentialTier.USER
    ) -> list[UserResponse]:
        """List a tenant's users ordered by name."""
        stmt = select(users).where(users.c.tenant_id == tenant_id).order_by(users.c.name)

        async with self.database.session(tier) as db:
            result = await db.execute(stmt)
            rows = result.mappings().all()

        return [UserResponse.model_validate(dict(row)) for row in rows]

    async def get_user(
        self,
        user_id: UUID,
        tenant_id: UUID | None = None,
        tier: CredentialTier = CredentialTier.USER,
    ) -> UserResponse:
        """
        Get a user by ID, optionally restricted to a tenant.

        Raises:
            NotFoundException: If user not found
        """
        conditions = [users.c.id == user_id]
        if tenant_id is not None:
            conditions.append(users.c.tenant_id == tenant_id)

        async with self.database.session(tier) as db:
            result = await db.execute(select(users).where(and_(*conditions)))
            row = result.mappings().first()

        if not row:
            raise NotFoundException("User not found")

        return UserResponse.model_validate(dict(row))

    async def get_user_by_email(
        self, email: str, tier: CredentialTier = CredentialTier.USER
    ) -> UserResponse | None:
        """Get a user by email, or None."""
        async with self.database.session(tier) as db:
            result = await db.execute(select(users).where(users.c.email == email))
            row = result.mappings().first()

        return UserResponse.model_validate(dict(row)) if row else None

    async def update_user(
        self,
        tenant_id: UUID,
        user_id: UUID,
        data: UserUpdate,
        tier: CredentialTier = CredentialTier.USER,
    ) -> UserResponse:
        """Update a user's provided fields."""
        values = column_values(data, exclude_unset=True)
        if not values:
            return await self.get_user(user_id, tenant_id, tier)

        values["updated_at"] = utc_now()
        stmt = (
            update(users)
            .where(and_(users.c.id == user_id, users.c.tenant_id == tenant_id))
            .values(**values)
            .returning(users)
        )

        async with self.database.session(tier) as db:
            result = await db.execute(stmt)
            row = result.mappings().first()
            if not row:
                raise NotFoundException("User not found")
            await db.commit()

        return UserResponse.model_validate(dict(row))

    async def delete_user(
        self,
        tenant_id: UUID,
        user_id: UUID,
        tier: CredentialTier = CredentialTier.USER,
    ) -> None:
        """Delete a user."""
        stmt = (
            delete(users)
            .where(and_(users.c.id == user_id, users.c.tenant_id == tenant_id))
            .returning(users.c.id)
        )

        async with self.database.session(tier) as db:
            result = await db.execute(stmt)
            if result.first() is None:
                raise NotFoundException("User not found")
            await db.commit()
