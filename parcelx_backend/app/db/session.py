"""
Database session configuration.

This module handles database engine creation and session management
using SQLAlchemy with async support. The engine is owned by a ``Database``
handle that the application builds on startup and disposes on shutdown;
request handlers receive sessions through the ``get_db`` dependency.
"""

import logging
from contextlib import asynccontextmanager
import uuid
from datetime import datetime, timezone
from typing import AsyncIterator, Optional

from fastapi import Request
from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base

from parcelx_backend.app.core.config import Settings

logger = logging.getLogger(__name__)

# Create declarative base for models
Base = declarative_base()


def new_id() -> str:
    """Generate a record id (32 hex characters)."""
    return uuid.uuid4().hex


def normalize_id(value: Optional[str]) -> Optional[str]:
    """
    Return the canonical hex form of a record id, or None if it is not well formed.

    Accepts both the stored hex form and the hyphenated UUID form.
    """
    if not value:
        return None
    try:
        return uuid.UUID(str(value).strip()).hex
    except ValueError:
        return None


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Database:
    """
    Owns the async engine and session factory for one application instance.
    """

    def __init__(self, database_url: str, echo: bool = False, pool_size: int = 20, max_overflow: int = 10):
        engine_kwargs = {"echo": echo, "future": True}
        # SQLite uses a single-connection pool without sizing options
        if not database_url.startswith("sqlite"):
            engine_kwargs.update(pool_size=pool_size, max_overflow=max_overflow, pool_pre_ping=True)

        self.engine: AsyncEngine = create_async_engine(database_url, **engine_kwargs)
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autocommit=False,
            autoflush=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        return cls(
            settings.database_url,
            echo=settings.db_echo,
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
        )

    async def create_all(self) -> None:
        """Create tables and the indexes declared on the models."""
        # Import models so they are registered with Base
        from parcelx_backend.app.models import user, parcel, rider, payment, tracking_event  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables and indexes ensured")

    async def dispose(self) -> None:
        await self.engine.dispose()
        logger.info("Database engine disposed")

    async def session(self) -> AsyncIterator[AsyncSession]:
        async with self.session_factory() as session:
            try:
                yield session
            finally:
                await session.close()


async def get_db(request: Request) -> AsyncIterator[AsyncSession]:
    """
    FastAPI dependency for database sessions.

    Yields an async database session and ensures it's properly closed.
    """
    database: Database = request.app.state.database
    async for session in database.session():
        yield session


@asynccontextmanager
async def unit_of_work(db: AsyncSession) -> AsyncIterator[AsyncSession]:
    """
    Commit everything written inside the block as one transaction.

    Any exception rolls the session back and propagates.
    """
    try:
        yield db
        await db.commit()
    except Exception:
        await db.rollback()
        raise
