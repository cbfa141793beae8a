"""
Async SQLAlchemy engine, session factory and declarative base.

Production runs on PostgreSQL through asyncpg; a ``sqlite+aiosqlite`` URL
works for local demos and the test suite.
"""

import logging
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base
from fleetflow.app.core.config import settings

logger = logging.getLogger("fleetflow.db")


def engine_options(database_url: str) -> dict:
    if database_url.startswith("sqlite"):
        # aiosqlite brings its own pool; sizing arguments are rejected
        return {}
    return {
        "pool_size": settings.db_pool_size,
        "max_overflow": settings.db_max_overflow,
        "pool_pre_ping": True,
    }


engine = create_async_engine(
    settings.database_url,
    echo=settings.db_echo,
    **engine_options(settings.database_url),
)

# Rows stay readable after commit; endpoints refresh what the server changed
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)

Base = declarative_base()


async def get_db():
    """Request-scoped session. Uncommitted work is rolled back if the handler fails."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception:
            logger.debug("Rolling back session after request error")
            await session.rollback()
            raise
