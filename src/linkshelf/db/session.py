"""Async SQLAlchemy engine and session factory."""
from functools import lru_cache

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from linkshelf.core.config import get_settings


@lru_cache
def get_engine() -> AsyncEngine:
    """Create the engine on first use, so importing needs no DATABASE_URL."""
    settings = get_settings()
    return create_async_engine(
        settings.database_url,
        echo=False,
        pool_pre_ping=True,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
    )


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """
    Return a session factory bound to the configured engine.

    Services only flush; whoever opens the session commits once the unit of
    work is done (see tasks.cleanup.run_cleanup).
    """
    return async_sessionmaker(
        get_engine(),
        class_=AsyncSession,
        expire_on_commit=False,
    )
