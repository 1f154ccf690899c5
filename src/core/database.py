import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.engine import make_url
from sqlalchemy.pool import NullPool, StaticPool

from ..models.base import Base
from .config import get_settings

logger = logging.getLogger(__name__)

# Global variables for database connection
_engine: Optional[AsyncEngine] = None
_session_factory: Optional[async_sessionmaker[AsyncSession]] = None


def get_database_url() -> str:
    """Get database URL from settings (``DATABASE_URL`` in the environment)."""
    return get_settings().database_url


def create_engine_for(database_url: str, echo: bool = False) -> AsyncEngine:
    """Create an async engine.

    File-backed SQLite gets no connection pool; in-memory SQLite shares one
    connection so every session sees the same database.
    """
    kwargs = {"echo": echo, "pool_pre_ping": True}
    url = make_url(database_url)
    if url.get_backend_name() == "sqlite":
        if url.database in (None, "", ":memory:"):
            kwargs["poolclass"] = StaticPool
            kwargs["connect_args"] = {"check_same_thread": False}
        else:
            kwargs["poolclass"] = NullPool
    return create_async_engine(database_url, **kwargs)


async def create_tables(engine: AsyncEngine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def init_database(database_url: Optional[str] = None) -> None:
    """Initialize database connection and create tables"""
    global _engine, _session_factory

    database_url = database_url or get_database_url()
    logger.info("Initializing database: %s", database_url)

    _engine = create_engine_for(database_url, echo=get_settings().database_echo)
    _session_factory = async_sessionmaker(
        _engine, class_=AsyncSession, expire_on_commit=False
    )

    await create_tables(_engine)
    logger.info("Database tables created/verified")


async def close_database() -> None:
    """Close database connection"""
    global _engine, _session_factory
    if _engine:
        await _engine.dispose()
        logger.info("Database connection closed")
    _engine = None
    _session_factory = None


async def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Session factory handed to repositories; initializes on first use."""
    if _session_factory is None:
        await init_database()
    assert _session_factory is not None
    return _session_factory


@asynccontextmanager
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Get database session context manager"""
    factory = await get_session_factory()

    async with factory() as session:
        try:
            yield session
        except Exception as e:
            await session.rollback()
            logger.error("Database session error: %s", e)
            raise


async def health_check() -> bool:
    """Check if database is accessible"""
    try:
        async with get_db_session() as session:
            result = await session.execute(text("SELECT 1"))
            value = result.scalar()
            if value != 1:
                logger.warning(
                    "Database health check query returned unexpected value: %s", value
                )
                return False
            return True
    except Exception as e:
        logger.error("Database health check failed: %s", e, exc_info=True)
        return False
