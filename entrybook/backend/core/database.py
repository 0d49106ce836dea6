"""
Database Configuration.

SQLAlchemy async engine for the configured record store.
Uses lazy initialization to prevent import-time failures when config is missing.
"""

from typing import Any

from sqlalchemy.ext.asyncio import create_async_engine

from entrybook.backend.core.logging import get_logger

logger = get_logger(__name__)

# Module-level state for lazy initialization
_engine: Any = None


def _create_engine() -> Any:
    """Create async SQLAlchemy engine."""
    from entrybook.backend.core.config import get_app_config

    db_config = get_app_config().database
    engine = create_async_engine(db_config.url, echo=db_config.echo)
    logger.debug("Database engine created", extra={"dialect": engine.dialect.name})
    return engine


def get_engine() -> Any:
    """Get the database engine, creating it on first use."""
    global _engine
    if _engine is None:
        _engine = _create_engine()
    return _engine


async def create_all() -> None:
    """Create all tables registered on the declarative base."""
    from entrybook.backend.models import Base

    engine = get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables created")
