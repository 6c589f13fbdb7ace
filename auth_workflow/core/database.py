"""
Database configuration and connection management for the auth service.
Implements async SQLAlchemy with connection pooling.
"""
from typing import Any, Dict
from sqlalchemy import text
from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine, AsyncSession, async_sessionmaker
import structlog

from .config import settings
from ..models.base import Base

logger = structlog.get_logger()


def create_engine_from_settings(database_url: str = settings.DATABASE_URL) -> AsyncEngine:
    """Create the async engine; pool sizing only applies to server databases."""
    engine_kwargs: Dict[str, Any] = {"echo": settings.DEBUG, "pool_pre_ping": True}
    if not database_url.startswith("sqlite"):
        engine_kwargs.update(
            pool_size=settings.DATABASE_POOL_SIZE,
            max_overflow=settings.DATABASE_MAX_OVERFLOW,
            pool_recycle=settings.DATABASE_POOL_RECYCLE,
        )
    return create_async_engine(database_url, **engine_kwargs)


def create_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False
    )


engine = create_engine_from_settings()

# Create async session factory
AsyncSessionLocal = create_session_factory(engine)


class DatabaseHealthCheck:
    """Health check utilities for database connections."""

    @staticmethod
    async def check_connection() -> bool:
        """Check if database connection is healthy."""
        try:
            async with AsyncSessionLocal() as session:
                result = await session.execute(text("SELECT 1"))
                return result.scalar() == 1
        except Exception as e:
            logger.error("Database health check failed", error=str(e))
            return False


async def create_tables(bind: AsyncEngine = engine) -> None:
    """Create all tables directly; migrations own the schema outside development."""
    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables created")


async def close_db_connections():
    """Close all database connections on shutdown."""
    await engine.dispose()
    logger.info("Database connections closed")
