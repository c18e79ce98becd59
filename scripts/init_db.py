"""Script to create every table directly, bypassing migrations (development only)."""

import asyncio

from dotenv import load_dotenv
from sqlalchemy import text

from agenda.config import get_settings
from agenda.database import CredentialTier, Database


async def init_db() -> None:
    """Create extensions (PostgreSQL) and all tables on the privileged tier."""
    database = Database.from_settings(get_settings())
    engine = database.engine(CredentialTier.SERVICE)

    try:
        if engine.dialect.name == "postgresql":
            async with engine.begin() as conn:
                await conn.execute(text('CREATE EXTENSION IF NOT EXISTS "pgcrypto"'))
                await conn.execute(text('CREATE EXTENSION IF NOT EXISTS "btree_gist"'))

        await database.create_all()
        print("✓ Database initialized successfully!")
    finally:
        await database.dispose()


if __name__ == "__main__":
    load_dotenv()
    asyncio.run(init_db())
