"""Database engine and session management."""

from typing import Any

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from core.config import Settings
from infrastructure.database.models import Base


def create_engine(settings: Settings) -> AsyncEngine:
    """Create the async engine for the configured store."""
    url = settings.async_database_url
    connect_args: dict[str, Any] = {}
    # Supabase/pgbouncer transaction pooling breaks asyncpg's statement cache.
    if "pooler.supabase.com" in url or "pgbouncer=true" in url:
        connect_args["statement_cache_size"] = 0

    return create_async_engine(
        url,
        echo=settings.debug,
        pool_pre_ping=True,
        connect_args=connect_args,
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create the async session factory bound to an engine."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


async def create_schema(engine: AsyncEngine) -> None:
    """Create missing tables (local development and tests; production uses Alembic)."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
