"""
Engine and session wiring for the persistence service.

Nothing here runs at import time: the engine is built from the Settings object
handed over by the application factory, so tests and the seeding script can
point the same code at their own database.
"""

import logging
from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from inventory.config.settings import Settings
from inventory.exceptions.failures import FailureKind, KnownFailure

logger = logging.getLogger(__name__)


def build_engine(settings: Settings) -> AsyncEngine:
    """
    Create the AsyncEngine for `settings.DATABASE_URL`.

    Raises:
        KnownFailure(STORAGE_UNAVAILABLE): when no connection string is configured.
    """
    if not settings.DATABASE_URL:
        raise KnownFailure(
            FailureKind.STORAGE_UNAVAILABLE,
            "DATABASE_URL is not configured",
        )

    return create_async_engine(
        settings.DATABASE_URL,
        echo=settings.SQLALCHEMY_ECHO,
        pool_pre_ping=True,  # connection health check on checkout
    )


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # expire_on_commit=False: services serialise entities after committing.
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


async def ping(engine: AsyncEngine) -> None:
    """Round-trip a trivial statement; raises whatever the driver raises when the store is unreachable."""
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
    logger.info("database.ping.ok", extra={"dialect": engine.dialect.name})


async def create_schema(engine: AsyncEngine) -> None:
    """Create missing tables. Used by the seeding script and tests; there is no migration tooling."""
    from .base import Base
    from inventory import models  # noqa: F401 - registers models with Base.metadata

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency. Yields a request-scoped session from the app's factory and closes it afterwards.

    Usage:
        async def endpoint(db: AsyncSession = Depends(get_session)):
            await db.execute(...)
    """
    session_factory = request.app.state.session_factory
    async with session_factory() as session:
        yield session
