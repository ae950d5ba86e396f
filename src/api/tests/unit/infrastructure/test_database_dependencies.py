"""Unit tests for database dependency injection.

Engines are created lazily and never connect, so no database is needed.
"""

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from infrastructure.database.dependencies import (
    close_database_connections,
    get_write_engine,
    get_write_session,
)


@pytest_asyncio.fixture(autouse=True)
async def reset_engine():
    yield
    await close_database_connections()


@pytest.mark.asyncio
async def test_get_write_engine():
    """Test that get_write_engine returns an AsyncEngine."""
    engine = get_write_engine()

    assert isinstance(engine, AsyncEngine)
    assert engine.url.drivername == "postgresql+asyncpg"


@pytest.mark.asyncio
async def test_engine_is_singleton():
    assert get_write_engine() is get_write_engine()


@pytest.mark.asyncio
async def test_get_write_session():
    """Test that get_write_session yields one session bound to the engine."""
    engine = get_write_engine()
    sessions = []

    async for session in get_write_session():
        sessions.append(session)
        assert isinstance(session, AsyncSession)
        assert session.bind.sync_engine is engine.sync_engine

    assert len(sessions) == 1


@pytest.mark.asyncio
async def test_close_database_connections():
    """After closing, a new engine instance is created on demand."""
    engine = get_write_engine()

    await close_database_connections()

    assert get_write_engine() is not engine
