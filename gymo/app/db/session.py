# gymo/app/db/session.py
"""
Async database session management for SQLAlchemy.

The engine and session factory belong to the application instance
(created in the lifespan, kept on app.state) so tests and workers can
each point at their own database.

Production considerations:
- Uses asyncpg for PostgreSQL
- Uses aiosqlite for SQLite (local development and tests)
- Pool settings differ for SQLite (no pooling) vs PostgreSQL
"""
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, AsyncIterator

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import NullPool, AsyncAdaptedQueuePool

from gymo.app.core.config import Settings
from gymo.app.core.exceptions import InternalError

logger = logging.getLogger(__name__)


def create_engine_from_settings(settings: Settings) -> AsyncEngine:
    """
    Create and configure the async SQLAlchemy engine.

    SQLite:
    - NullPool, a fresh connection per session
    - check_same_thread=False for async compatibility
    - timeout=30 so concurrent writers wait on the file lock instead of failing

    PostgreSQL:
    - AsyncAdaptedQueuePool (pool_size=5, max_overflow=10)
    - pool_pre_ping=True and pool_recycle=300 against dropped idle connections
    """
    if settings.is_sqlite:
        return create_async_engine(
            settings.DATABASE_URL,
            echo=settings.DATABASE_ECHO,
            poolclass=NullPool,
            connect_args={"check_same_thread": False, "timeout": 30},
        )

    return create_async_engine(
        settings.DATABASE_URL,
        echo=settings.DATABASE_ECHO,
        poolclass=AsyncAdaptedQueuePool,
        pool_size=5,
        max_overflow=10,
        pool_pre_ping=True,
        pool_recycle=300,
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # expire_on_commit=False: resolved users stay readable after a commit
    # autoflush=False: writes happen only where a workflow commits
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency generator for database sessions.

    Usage in FastAPI endpoints:
        @router.get("/items")
        async def get_items(db: AsyncSession = Depends(get_db)):
            ...

    Note: This does NOT auto-commit. Workflows commit explicitly.
    """
    session_factory: async_sessionmaker[AsyncSession] = request.app.state.session_factory
    async with session_factory() as session:
        yield session


@asynccontextmanager
async def storage_errors(db: AsyncSession) -> AsyncIterator[None]:
    """
    Roll back and turn any SQLAlchemy failure into InternalError.

    Usage:
        async with storage_errors(db):
            db.add(row)
            await db.commit()
    """
    try:
        yield
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Storage failure: {e}")
        raise InternalError(str(e.orig) if getattr(e, "orig", None) else str(e)) from e
