"""Integration test fixtures for database tests.

These fixtures require a running PostgreSQL instance. Tests are skipped
when the database cannot be reached.
"""

from __future__ import annotations

import os
from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from pydantic import SecretStr
from sqlalchemy import text
from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from infrastructure.database.engines import create_write_engine
from infrastructure.database.models import Base
from infrastructure.settings import DatabaseSettings
from users.infrastructure.user_repository import UserRepository


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: mark test as integration test (requires database)",
    )


@pytest.fixture(scope="session")
def integration_db_settings() -> DatabaseSettings:
    """Database settings for integration tests.

    Override with environment variables:
        USER_SERVICE_DB_HOST, USER_SERVICE_DB_PORT, etc.
    """
    return DatabaseSettings(
        host=os.getenv("USER_SERVICE_DB_HOST", "localhost"),
        port=int(os.getenv("USER_SERVICE_DB_PORT", "5432")),
        database=os.getenv("USER_SERVICE_DB_DATABASE", "users"),
        username=os.getenv("USER_SERVICE_DB_USERNAME", "users"),
        password=SecretStr(os.getenv("USER_SERVICE_DB_PASSWORD", "users_dev_password")),
    )


@pytest_asyncio.fixture
async def engine(
    integration_db_settings: DatabaseSettings,
) -> AsyncGenerator[AsyncEngine, None]:
    """Provide an engine with the users table created."""
    engine = create_write_engine(integration_db_settings)
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    except (OSError, DBAPIError) as e:
        await engine.dispose()
        pytest.skip(f"PostgreSQL is not available: {e}")

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(
    engine: AsyncEngine,
) -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """Provide a session factory for tests that need several sessions."""
    factory = async_sessionmaker(
        engine, expire_on_commit=False, close_resets_only=False
    )

    async with factory() as session, session.begin():
        await session.execute(text("DELETE FROM users"))

    yield factory

    async with factory() as session, session.begin():
        await session.execute(text("DELETE FROM users"))


@pytest_asyncio.fixture
async def async_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Provide an async session against a clean users table."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def user_repository(async_session: AsyncSession) -> UserRepository:
    return UserRepository(session=async_session)
