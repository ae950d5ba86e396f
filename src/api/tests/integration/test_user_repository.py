"""Integration tests for UserRepository.

These tests require PostgreSQL to be running.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.ext.asyncio import async_sessionmaker

from infrastructure.database.engines import create_write_engine
from infrastructure.settings import DatabaseSettings
from users.domain.aggregates import User
from users.domain.value_objects import UserId
from users.infrastructure.user_repository import UserRepository
from users.ports.exceptions import DuplicateEntityError, StorageError

pytestmark = pytest.mark.integration


def _new_user(created_at: datetime | None = None) -> User:
    return User(
        id=UserId(uuid.uuid4()),
        created_at=created_at or datetime.now(timezone.utc),
    )


class TestUserRoundTrip:
    """Tests for insert and lookup."""

    @pytest.mark.asyncio
    async def test_inserts_and_finds_user(self, user_repository, async_session):
        user = _new_user()

        async with async_session.begin():
            await user_repository.insert(user)

        async with async_session.begin():
            found = await user_repository.find_by_external_user_id(user.id)

        assert found == user
        assert found.created_at == user.created_at

    @pytest.mark.asyncio
    async def test_unknown_user_is_none(self, user_repository, async_session):
        async with async_session.begin():
            found = await user_repository.find_by_external_user_id(
                UserId(uuid.uuid4())
            )

        assert found is None

    @pytest.mark.asyncio
    async def test_duplicate_insert_is_reported(self, session_factory):
        user = _new_user()
        async with session_factory() as session, session.begin():
            await UserRepository(session=session).insert(user)

        async with session_factory() as session:
            with pytest.raises(DuplicateEntityError):
                async with session.begin():
                    await UserRepository(session=session).insert(user)

    @pytest.mark.asyncio
    async def test_uncommitted_insert_is_rolled_back(
        self, user_repository, async_session
    ):
        user = _new_user()

        with pytest.raises(RuntimeError):
            async with async_session.begin():
                await user_repository.insert(user)
                raise RuntimeError("abort")

        async with async_session.begin():
            assert await user_repository.find_by_external_user_id(user.id) is None


class TestListAndWipe:
    """Tests for listing and bulk removal."""

    @pytest.mark.asyncio
    async def test_lists_oldest_first(self, user_repository, async_session):
        now = datetime.now(timezone.utc)
        newer = _new_user(now)
        older = _new_user(now - timedelta(hours=1))

        async with async_session.begin():
            await user_repository.insert(newer)
            await user_repository.insert(older)

        async with async_session.begin():
            users = await user_repository.list_all()

        assert [u.id for u in users] == [older.id, newer.id]

    @pytest.mark.asyncio
    async def test_wipe_removes_every_row(self, user_repository, async_session):
        async with async_session.begin():
            for _ in range(3):
                await user_repository.insert(_new_user())

        async with async_session.begin():
            deleted = await user_repository.wipe_all()

        async with async_session.begin():
            remaining = await user_repository.list_all()

        assert deleted == 3
        assert remaining == []

    @pytest.mark.asyncio
    async def test_delete_single_user(self, user_repository, async_session):
        user = _new_user()
        async with async_session.begin():
            await user_repository.insert(user)

        async with async_session.begin():
            assert await user_repository.delete(user.id) is True
        async with async_session.begin():
            assert await user_repository.delete(user.id) is False


class TestUnavailableDatabase:
    """Tests for storage failures when the server cannot be reached."""

    @pytest.mark.asyncio
    async def test_unreachable_server_raises_storage_error(self):
        settings = DatabaseSettings(host="127.0.0.1", port=1, database="users")
        engine = create_write_engine(settings)
        factory = async_sessionmaker(engine, expire_on_commit=False)

        try:
            async with factory() as session:
                repository = UserRepository(session=session)
                with pytest.raises(StorageError):
                    await repository.find_by_external_user_id(UserId(uuid.uuid4()))
        finally:
            await engine.dispose()


class TestClosedSession:
    """Tests for storage failures after the session has been closed."""

    @pytest.mark.asyncio
    async def test_closed_session_does_not_reopen(self, session_factory):
        user = _new_user()
        async with session_factory() as session, session.begin():
            await UserRepository(session=session).insert(user)

        await session.close()
        repository = UserRepository(session=session)

        with pytest.raises(StorageError):
            await repository.find_by_external_user_id(user.id)
        with pytest.raises(StorageError):
            await repository.list_all()
