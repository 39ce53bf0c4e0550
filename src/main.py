"""Application wiring for the profile admin."""

import asyncio
from collections.abc import Callable

import structlog
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from client.admin import ProfileAdmin
from client.query_cache import QueryCache
from core.config import Settings, get_settings
from core.logging import setup_logging
from domain.repositories.filter_state_store import IFilterStateStore
from domain.services.filter_state_service import FilterStateManager
from domain.services.profile_service import ProfileService
from domain.services.status_service import StatusService
from infrastructure.database.session import (
    create_engine,
    create_schema,
    create_session_factory,
)
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork
from infrastructure.storage.filter_state_store import JsonFileKeyValue, KeyValueFilterStateStore

logger = structlog.get_logger()


def get_uow_factory(
    session_factory: async_sessionmaker[AsyncSession],
) -> Callable[[], SQLAlchemyUnitOfWork]:
    """Factory for creating Unit of Work instances."""

    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(session_factory)

    return factory


def create_admin(
    settings: Settings | None = None,
    *,
    session_factory: async_sessionmaker[AsyncSession] | None = None,
    filter_store: IFilterStateStore | None = None,
) -> ProfileAdmin:
    """Create and wire the admin facade from settings."""
    settings = settings or get_settings()
    if session_factory is None:
        session_factory = create_session_factory(create_engine(settings))
    if filter_store is None:
        filter_store = KeyValueFilterStateStore(
            JsonFileKeyValue(settings.filter_state_path),
            prefix=settings.filter_storage_prefix,
        )

    uow_factory = get_uow_factory(session_factory)
    admin = ProfileAdmin(
        profiles=ProfileService(
            uow_factory,
            rejected_status_id=settings.rejected_status_id,
            inequality_leads_order=settings.inequality_requires_leading_order,
            max_page_size=settings.max_page_size,
            max_cached_cursors=settings.max_cached_page_cursors,
        ),
        statuses=StatusService(uow_factory),
        filters=FilterStateManager(filter_store),
        cache=QueryCache(stale_time=settings.query_stale_time_seconds),
        page_size=settings.default_page_size,
    )
    logger.info("admin_created", app_env=settings.app_env)
    return admin


async def init_store(engine: AsyncEngine, settings: Settings | None = None) -> int:
    """Create missing tables and seed the well-known statuses.

    Returns the number of statuses inserted.
    """
    settings = settings or get_settings()
    await create_schema(engine)
    if not settings.seed_default_statuses:
        return 0
    statuses = StatusService(get_uow_factory(create_session_factory(engine)))
    return await statuses.seed_default_statuses()


async def _main() -> None:
    settings = get_settings()
    engine = create_engine(settings)
    try:
        seeded = await init_store(engine, settings)
        logger.info("store_initialized", seeded_statuses=seeded)
    finally:
        await engine.dispose()


if __name__ == "__main__":
    setup_logging()
    asyncio.run(_main())
