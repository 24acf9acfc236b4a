"""Script to initialize the database without Alembic (local development and demos)."""

import asyncio

from app.config import settings
from app.database import engine
from app.models import metadata


async def init_db() -> None:
    """Initialize the database by creating all tables."""
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)

    await engine.dispose()
    print(f"✓ Database initialized successfully! ({settings.database_url.split('://')[0]})")


if __name__ == "__main__":
    asyncio.run(init_db())
