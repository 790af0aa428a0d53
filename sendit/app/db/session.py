"""
Database session configuration.

The engine and its connection pool live in an explicit ``Database`` object
built from settings. The application opens it on startup and disposes it
on shutdown; request handlers receive one ``AsyncSession`` per request
through the ``get_db`` dependency.
"""

import logging
from typing import AsyncIterator, Optional

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import declarative_base

logger = logging.getLogger(__name__)

# Create declarative base for models
Base = declarative_base()


class Database:
    """Owns the async engine and the session factory bound to it."""

    def __init__(
        self,
        url: str,
        echo: bool = False,
        pool_size: Optional[int] = None,
        max_overflow: Optional[int] = None,
        **engine_kwargs,
    ):
        self.url = url
        self.echo = echo
        self.engine_kwargs = dict(engine_kwargs)
        # SQLite's default pool takes no sizing arguments
        if pool_size is not None:
            self.engine_kwargs["pool_size"] = pool_size
        if max_overflow is not None:
            self.engine_kwargs["max_overflow"] = max_overflow
        self.engine: Optional[AsyncEngine] = None
        self.session_factory: Optional[async_sessionmaker] = None

    @classmethod
    def from_settings(cls, settings) -> "Database":
        if settings.database_url.startswith("sqlite"):
            return cls(settings.database_url, echo=settings.db_echo)
        return cls(
            settings.database_url,
            echo=settings.db_echo,
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
        )

    async def connect(self, create_tables: bool = True) -> None:
        """Create the engine (and, by default, any missing tables)."""
        if self.engine is not None:
            return
        self.engine = create_async_engine(self.url, echo=self.echo, **self.engine_kwargs)
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autocommit=False,
            autoflush=False,
        )
        if create_tables:
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        logger.info("Database connected: %s", self.engine.url.render_as_string(hide_password=True))

    async def disconnect(self) -> None:
        if self.engine is None:
            return
        await self.engine.dispose()
        self.engine = None
        self.session_factory = None
        logger.info("Database connection pool disposed")

    async def session(self) -> AsyncIterator[AsyncSession]:
        if self.session_factory is None:
            raise RuntimeError("Database is not connected. Call connect() first.")
        async with self.session_factory() as session:
            yield session


async def get_db(request: Request) -> AsyncIterator[AsyncSession]:
    """
    FastAPI dependency for database sessions.

    Yields an async database session from the application's Database and
    ensures it's properly closed.
    """
    database: Database = request.app.state.database
    async for session in database.session():
        yield session
