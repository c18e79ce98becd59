"""Database configuration and connection management."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from enum import Enum
from typing import Any

import structlog
from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from agenda.config import Settings
from agenda.models import metadata

logger = structlog.get_logger()

SQLITE_BEGIN_MODE = "sqlite_begin_mode"


class CredentialTier(str, Enum):
    """Credential tier a storage operation runs under."""

    USER = "user"
    SERVICE = "service"


def to_async_url(url: str) -> str:
    """Convert a sync PostgreSQL URL to its asyncpg form."""
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+asyncpg://", 1)
    if url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql+asyncpg://", 1)
    return url


def _take_over_sqlite_transactions(engine: AsyncEngine) -> None:
    """
    Emit BEGIN from SQLAlchemy instead of the SQLite driver.

    The driver only opens a transaction before the first write, so reads
    made earlier in a session would not be part of it. A connection whose
    execution options carry ``SQLITE_BEGIN_MODE`` begins in that mode.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def disable_driver_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def begin(conn):
        mode = conn.get_execution_options().get(SQLITE_BEGIN_MODE)
        conn.exec_driver_sql(f"BEGIN {mode}" if mode else "BEGIN")


def _engine_options(url: str, settings: Settings | None) -> dict[str, Any]:
    """Pool and driver options for a storage URL."""
    if not url.startswith("postgresql+asyncpg://") or settings is None:
        return {}

    return {
        "pool_pre_ping": True,
        "pool_size": settings.db_pool_size,
        "max_overflow": settings.db_max_overflow,
        "pool_recycle": 3600,
        "connect_args": {
            "server_settings": {
                "application_name": settings.app_name,
            },
        },
    }


class Database:
    """
    Storage handle holding one engine per credential tier.

    Built once at startup and passed to every service that needs storage.
    """

    def __init__(
        self,
        user_url: str,
        service_url: str,
        *,
        echo: bool = False,
        booking_isolation_level: str = "SERIALIZABLE",
        settings: Settings | None = None,
    ):
        """Create engines and session factories for both tiers."""
        self.booking_isolation_level = booking_isolation_level
        self._engines: dict[CredentialTier, AsyncEngine] = {}
        self._sessionmakers: dict[CredentialTier, async_sessionmaker[AsyncSession]] = {}

        for tier, url in ((CredentialTier.USER, user_url), (CredentialTier.SERVICE, service_url)):
            async_url = to_async_url(url)
            engine = create_async_engine(
                async_url,
                echo=echo,
                **_engine_options(async_url, settings),
            )
            if engine.dialect.name == "sqlite":
                _take_over_sqlite_transactions(engine)
            self._engines[tier] = engine
            self._sessionmakers[tier] = async_sessionmaker(
                engine,
                class_=AsyncSession,
                expire_on_commit=False,
            )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        """Build the storage handle from application settings."""
        return cls(
            settings.database_url,
            settings.service_database_url,
            echo=settings.debug,
            booking_isolation_level=settings.booking_isolation_level,
            settings=settings,
        )

    def engine(self, tier: CredentialTier) -> AsyncEngine:
        """Get the engine for a credential tier."""
        return self._engines[tier]

    @asynccontextmanager
    async def session(self, tier: CredentialTier) -> AsyncIterator[AsyncSession]:
        """Open a session under the given credential tier."""
        async with self._sessionmakers[tier]() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    async def pin_isolation(self, session: AsyncSession, tier: CredentialTier) -> None:
        """
        Run the session's transaction at the booking isolation level.

        Must be called before the first statement of the transaction. On
        SQLite the transaction begins IMMEDIATE, taking the write lock before
        the conflict check reads.
        """
        if self.engine(tier).dialect.name == "sqlite":
            await session.connection(execution_options={SQLITE_BEGIN_MODE: "IMMEDIATE"})
            return
        await session.connection(
            execution_options={"isolation_level": self.booking_isolation_level}
        )

    async def check_connection(self, tier: CredentialTier) -> bool:
        """Check if the tier's database connection is healthy."""
        try:
            async with self.engine(tier).connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.warning("database_check_failed", tier=tier.value, error=str(e))
            return False

    async def create_all(self) -> None:
        """Create all tables on the privileged tier (development and tests)."""
        async with self.engine(CredentialTier.SERVICE).begin() as conn:
            await conn.run_sync(metadata.create_all)

    async def drop_all(self) -> None:
        """Drop all tables on the privileged tier."""
        async with self.engine(CredentialTier.SERVICE).begin() as conn:
            await conn.run_sync(metadata.drop_all)

    async def dispose(self) -> None:
        """Close all pooled connections."""
        for engine in self._engines.values():
            await engine.dispose()
