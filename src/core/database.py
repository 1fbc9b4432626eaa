"""Database configuration and session management."""

import logging
from typing import AsyncGenerator, Optional

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import declarative_base

from .settings import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()

# SQLAlchemy Base for ORM models
Base = declarative_base()


def _engine_options(database_url: str) -> dict:
    """Pool options only apply to server databases."""
    if database_url.startswith("sqlite"):
        return {"echo": settings.debug}
    return {
        "pool_size": settings.database_pool_size,
        "max_overflow": settings.database_max_overflow,
        "pool_timeout": settings.database_pool_timeout,
        "pool_recycle": settings.database_pool_recycle,
        "pool_pre_ping": True,
        "echo": settings.debug,
    }


class DatabaseManager:
    """Database connection and session management."""

    def __init__(self, database_url: Optional[str] = None):
        self._database_url = database_url or settings.database_url
        self._engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker] = None

    @property
    def engine(self) -> AsyncEngine:
        """Async engine, created on first use."""
        if self._engine is None:
            self._engine = create_async_engine(
                self._database_url, **_engine_options(self._database_url)
            )
        return self._engine

    @property
    def session_factory(self) -> async_sessionmaker:
        """Session factory bound to the async engine."""
        if self._session_factory is None:
            self._session_factory = async_sessionmaker(
                self.engine,
                class_=AsyncSession,
                expire_on_commit=False,
                autoflush=False,
            )
        return self._session_factory

    async def connect(self) -> None:
        """Initialize database connections."""
        try:
            async with self.engine.begin() as conn:
                await conn.execute(text("SELECT 1"))
            logger.info("Database async connection established")
        except Exception as e:
            logger.error(f"Failed to connect to database: {e}")
            raise

    async def disconnect(self) -> None:
        """Close database connections."""
        if self._engine is None:
            return
        try:
            await self._engine.dispose()
            logger.info("Database connections closed")
        except Exception as e:
            logger.error(f"Error closing database connections: {e}")
        finally:
            self._engine = None
            self._session_factory = None


# Global database manager instance
_db_manager = DatabaseManager()


def get_database() -> DatabaseManager:
    """Get the database manager instance."""
    return _db_manager


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Dependency to get database session for FastAPI."""
    async with _db_manager.session_factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
