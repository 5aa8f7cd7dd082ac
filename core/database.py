"""
Database client for the Symptom Checker backend.

A single ``Database`` instance is built by the application factory and kept on
``app.state``. The async engine is created on first use and then reused by
every request until ``dispose()`` is called on shutdown.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import declarative_base

from core.logging import get_logger

logger = get_logger(__name__)

Base = declarative_base()


class DatabaseNotConfigured(RuntimeError):
    """Raised when a session is requested but no DATABASE_URL is set."""


class Database:
    """Lazily connected async database handle."""

    def __init__(self, url: Optional[str], echo: bool = False):
        self.url = url.strip() if url else None
        self.echo = echo
        self._engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker] = None

    @property
    def enabled(self) -> bool:
        return bool(self.url)

    @property
    def connected(self) -> bool:
        return self._engine is not None

    def _connect(self) -> async_sessionmaker:
        if not self.enabled:
            raise DatabaseNotConfigured("DATABASE_URL is not set")
        if self._engine is None:
            self._engine = create_async_engine(self.url, echo=self.echo, pool_pre_ping=True)
            self._session_factory = async_sessionmaker(
                self._engine, class_=AsyncSession, expire_on_commit=False
            )
            logger.info("Database engine created", dialect=self._engine.dialect.name)
        return self._session_factory

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Open a session, connecting on first use."""
        session_factory = self._connect()
        async with session_factory() as session:
            yield session

    async def create_all(self) -> None:
        """Create missing tables for every registered model."""
        self._connect()
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables ensured")

    async def dispose(self) -> None:
        if self._engine is None:
            return
        await self._engine.dispose()
        self._engine = None
        self._session_factory = None
        logger.info("Database engine disposed")
