"""Database configuration and connection management."""

from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from app.config import settings


def get_async_database_url(url: str) -> str:
    """Convert a sync database URL to its async driver equivalent."""
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+asyncpg://", 1)
    if url.startswith("sqlite://"):
        return url.replace("sqlite://", "sqlite+aiosqlite://", 1)
    return url


def build_engine(url: str, **overrides: Any) -> AsyncEngine:
    """
    Create an async engine with driver-appropriate options.

    PostgreSQL gets a connection pool; SQLite gets a busy timeout and WAL
    journaling so concurrent writers wait on each other instead of failing.

    Args:
        url: Database URL (sync or async form)
        overrides: Extra keyword arguments for create_async_engine

    Returns:
        Configured async engine
    """
    async_url = get_async_database_url(url)

    if async_url.startswith("sqlite"):
        options: dict[str, Any] = {
            "echo": settings.debug,
            "connect_args": {"timeout": settings.sqlite_busy_timeout_seconds},
        }
    else:
        options = {
            "echo": settings.debug,
            "pool_pre_ping": True,
            "pool_size": 10,
            "max_overflow": 20,
            "pool_recycle": 3600,
            "connect_args": {
                "server_settings": {
                    "application_name": settings.app_name,
                },
            },
        }
    if "poolclass" in overrides:
        # Sizing arguments are only valid for the default QueuePool
        options.pop("pool_size", None)
        options.pop("max_overflow", None)
    options.update(overrides)

    new_engine = create_async_engine(async_url, **options)

    if async_url.startswith("sqlite"):

        @event.listens_for(new_engine.sync_engine, "connect")
        def set_sqlite_pragma(dbapi_conn: Any, connection_record: Any) -> None:
            """Enable WAL journaling and foreign keys on every SQLite connection."""
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA journal_mode=WAL")
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return new_engine


# Create async engine with connection pooling
engine: AsyncEngine = build_engine(settings.database_url)

# Async session factory
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency for getting async database sessions."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def check_database_connection() -> bool:
    """Check if database connection is healthy."""
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True
    except Exception:
        return False
