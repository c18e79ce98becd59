"""Authentication backed by the hosted auth service."""

from datetime import UTC, datetime
from typing import Any
from uuid import UUID

import structlog
from sqlalchemy import insert, select
from sqlalchemy.exc import IntegrityError

from agenda.config import Settings
from agenda.core.auth_client import AuthClient
from agenda.core.exceptions import (
    BackendException,
    ConfigurationException,
    ConflictException,
    UnauthorizedException,
)
from agenda.core.security import verify_jwt
from agenda.database import CredentialTier, Database
from agenda.models import tenants, users
from agenda.schemas.auth import (
    AuthResponse,
    AuthUser,
    LoginRequest,
    SessionResponse,
    SignupRequest,
)
from agenda.schemas.tenants import TenantPlan, TenantStatus
from agenda.schemas.users import AuthProvider, UserRole

logger = structlog.get_logger()


def _identity(payload: dict[str, Any]) -> dict[str, Any]:
    """The user object of a backend answer (sessions nest it, signups may not)."""
    user = payload.get("user") or payload
    if not user.get("id"):
        raise BackendException("Auth backend returned no user", status_code=502, payload=payload)
    return user


class AuthService:
    """Signup, login and session handling on top of the auth backend."""

    def __init__(self, database: Database, client: AuthClient, settings: Settings):
        """Initialize auth service."""
        self.database = database
        self.client = client
        self.settings = settings

    async def signup(self, data: SignupRequest) -> AuthResponse:
        """
        Register a tenant and its first admin.

        The identity is created in the auth backend first; the tenant and
        the admin user row are then written together on the privileged tier.
        If that write fails the identity is deleted again, so a retry can
        sign up with the same email.

        Args:
            data: Signup request

        Returns:
            The new admin, with tokens when the backend issued a session

        Raises:
            BackendException: If the auth backend rejects the signup
            ConflictException: If the email already belongs to a staff member
        """
        result = await self.client.sign_up(
            data.email,
            data.password,
            {"name": data.name, "tenant_name": data.tenant_name},
        )
        identity = _identity(result)

        try:
            tenant_id, row = await self._store_signup(data, identity)
        except IntegrityError as e:
            await self._discard_identity(identity["id"])
            raise ConflictException("User already exists") from e
        except Exception:
            await self._discard_identity(identity["id"])
            raise

        logger.info("tenant_signup", tenant_id=str(tenant_id), user_id=identity["id"])
        return self._auth_response(row, result)

    async def _store_signup(
        self, data: SignupRequest, identity: dict[str, Any]
    ) -> tuple[UUID, dict[str, Any]]:
        """Write the tenant and its admin in one privileged transaction."""
        async with self.database.session(CredentialTier.SERVICE) as db:
            tenant = await db.execute(
                insert(tenants)
                .values(
                    name=data.tenant_name,
                    plan=TenantPlan.FREE.value,
                    status=TenantStatus.ACTIVE.value,
                )
                .returning(tenants.c.id)
            )
            tenant_id = tenant.scalar_one()

            user = await db.execute(
                insert(users)
                .values(
                    id=UUID(identity["id"]),
                    tenant_id=tenant_id,
                    name=data.name,
                    email=data.email,
                    role=UserRole.ADMIN.value,
                    auth_provider=AuthProvider.SUPABASE.value,
                )
                .returning(users)
            )
            row = dict(user.mappings().one())
            await db.commit()

        return tenant_id, row

    async def _discard_identity(self, identity_id: str) -> None:
        """Delete an identity whose tenant could not be stored."""
        try:
            await self.client.delete_user(identity_id)
        except (BackendException, ConfigurationException) as e:
            logger.error("signup_identity_orphaned", user_id=identity_id, error=str(e))

    async def login(
        self, data: LoginRequest, tier: CredentialTier = CredentialTier.SERVICE
    ) -> AuthResponse:
        """
        Sign in with email and password.

        Raises:
            BackendException: If the backend rejects the credentials
            UnauthorizedException: If the identity has no user row
        """
        session = await self.client.sign_in(data.email, data.password)
        user = await self._load_user(UUID(_identity(session)["id"]), tier)
        logger.info("user_login", user_id=str(user["id"]))
        return self._auth_response(user, session)

    async def refresh(
        self, refresh_token: str, tier: CredentialTier = CredentialTier.SERVICE
    ) -> AuthResponse:
        """Exchange a refresh token for a new session."""
        session = await self.client.refresh_session(refresh_token)
        user = await self._load_user(UUID(_identity(session)["id"]), tier)
        return self._auth_response(user, session)

    async def logout(self, access_token: str) -> None:
        """Revoke the session behind an access token."""
        await self.client.sign_out(access_token)

    async def get_session(
        self, access_token: str, tier: CredentialTier = CredentialTier.SERVICE
    ) -> SessionResponse:
        """Current user and token expiry, as seen by the auth backend."""
        identity = await self.client.get_user(access_token)
        user = await self._load_user(UUID(_identity(identity)["id"]), tier)

        expires_at = None
        claims = self._decode(access_token)
        if claims and claims.get("exp"):
            expires_at = datetime.fromtimestamp(claims["exp"], tz=UTC)

        return SessionResponse(user=AuthUser.model_validate(user), expires_at=expires_at)

    async def authenticate(
        self, access_token: str, tier: CredentialTier = CredentialTier.SERVICE
    ) -> AuthUser:
        """
        Resolve a bearer token to the staff member it belongs to.

        The token is verified locally; its ``sub`` claim is the user id.

        Raises:
            UnauthorizedException: If the token is invalid or the user is unknown
        """
        claims = self._decode(access_token)
        if claims is None:
            raise UnauthorizedException("Could not validate credentials")

        try:
            user_id = UUID(str(claims.get("sub")))
        except ValueError:
            raise UnauthorizedException("Invalid user ID format")

        return AuthUser.model_validate(await self._load_user(user_id, tier))

    def _decode(self, access_token: str) -> dict[str, Any] | None:
        return verify_jwt(
            access_token,
            self.settings.jwt_secret_key,
            algorithms=[self.settings.jwt_algorithm],
            audience=self.settings.jwt_audience,
        )

    async def _load_user(self, user_id: UUID, tier: CredentialTier) -> dict[str, Any]:
        async with self.database.session(tier) as db:
            result = await db.execute(select(users).where(users.c.id == user_id))
            row = result.mappings().first()

        if not row:
            raise UnauthorizedException("User not found")
        return dict(row)

    @staticmethod
    def _auth_response(user: dict[str, Any], session: dict[str, Any]) -> AuthResponse:
        return AuthResponse(
            user=AuthUser.model_validate(user),
            access_token=session.get("access_token"),
            refresh_token=session.get("refresh_token"),
            expires_in=session.get("expires_in"),
        )
