"""
Async SQLAlchemy engine & session factory for the cake shop store.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from cakeapp.core.config import Settings, settings


def engine_options(config: Settings) -> dict[str, Any]:
    """Keyword arguments for ``create_async_engine`` under *config*."""
    options: dict[str, Any] = {"echo": config.DB_ECHO, "pool_pre_ping": True}
    if config.DATABASE_URL.startswith("postgresql"):
        options.update(
            pool_size=config.DB_POOL_SIZE,
            max_overflow=config.DB_MAX_OVERFLOW,
            pool_recycle=config.DB_POOL_RECYCLE_SECONDS,
        )
    return options


engine = create_async_engine(settings.DATABASE_URL, **engine_options(settings))

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)
