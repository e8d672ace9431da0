"""
Core pytest configuration for the test suite.

Every test that touches the database gets its own SQLite file under tmp_path,
so services are free to commit. Domain fixtures (sample categories, products,
the HTTP client) live in tests/test_fixtures/ and are imported at the bottom.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import AsyncGenerator

# Silence noisy third-party loggers before they are imported.
NOISY_LOGGERS = (
    "sqlalchemy",
    "sqlalchemy.engine",
    "sqlalchemy.engine.Engine",
    "aiosqlite",
    "asyncio",
    "httpx",
)
for _name in NOISY_LOGGERS:
    logging.getLogger(_name).setLevel(logging.WARNING)

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from inventory.config.settings import Settings
from inventory.database.base import Base
from inventory import models  # noqa: F401 - registers tables on Base.metadata


def make_settings(**overrides) -> Settings:
    """Settings isolated from the developer's .env and environment."""
    values = {
        "ENV": "testing",
        "DATABASE_URL": "sqlite+aiosqlite://",
        "LOG_LEVEL": "DEBUG",
        "LOG_FORMAT": "text",
        "LOG_TO_STDOUT": True,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture()
def settings() -> Settings:
    return make_settings()


@pytest.fixture()
def database_url(tmp_path: Path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'inventory.db'}"


@pytest.fixture()
async def async_engine(database_url: str) -> AsyncGenerator[AsyncEngine, None]:
    engine = create_async_engine(database_url)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture()
def session_factory(async_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=async_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture()
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


from .test_fixtures.repository_fixtures import (  # noqa: E402
    category_repo,
    product_repo,
    seeded_categories,
    make_product,
)
from .test_fixtures.api_fixtures import (  # noqa: E402
    app,
    client,
    make_product_payload,
)
