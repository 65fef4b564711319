"""Database session management using SQLModel + async SQLAlchemy."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel

from repotalk_db.config import Settings, get_settings

# Register tables on SQLModel.metadata
from repotalk_db.database import models  # noqa: F401


logger = logging.getLogger(__name__)


class Database:
    """Long-lived handle on one async engine and its session factory.

    Construct once at startup, share across tasks, and call ``dispose()``
    (or use ``async with``) at shutdown.
    """

    def __init__(
        self,
        url: str,
        echo: bool = False,
        pool_size: int | None = None,
        max_overflow: int | None = None,
    ):
        self.url = url
        engine_kwargs: dict[str, Any] = {"echo": echo}
        # SQLite engines use a static/singleton pool without sizing options
        if not url.startswith("sqlite") and pool_size is not None:
            engine_kwargs["pool_size"] = pool_size
            if max_overflow is not None:
                engine_kwargs["max_overflow"] = max_overflow

        self.engine: AsyncEngine = create_async_engine(url, **engine_kwargs)
        self.session_maker = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "Database":
        settings = settings or get_settings()
        return cls(
            settings.database_url,
            echo=settings.sql_echo,
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
        )

    @property
    def is_postgres(self) -> bool:
        return self.engine.dialect.name == "postgresql"

    async def init_schema(self) -> None:
        """Create the vector extension and all tables.

        Note: In production, use Alembic migrations instead.
        This is here for development convenience.
        """
        async with self.engine.begin() as conn:
            if self.is_postgres:
                await conn.execute(text("CREATE EXTENSION IF NOT EXISTS vector"))
            await conn.run_sync(SQLModel.metadata.create_all)
        logger.info("Database schema initialized")

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Get an async database session."""
        async with self.session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def dispose(self) -> None:
        """Close database connections."""
        await self.engine.dispose()
        logger.info("Database connections closed")

    async def __aenter__(self) -> "Database":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.dispose()


_database: Database | None = None


def get_database() -> Database:
    """Get the process-wide database, creating it from settings on first use."""
    global _database
    if _database is None:
        _database = Database.from_settings()
    return _database


async def close_database() -> None:
    """Dispose the process-wide database if it was created."""
    global _database
    if _database is not None:
        await _database.dispose()
        _database = None
