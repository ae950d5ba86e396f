"""Integration tests for just-in-time provisioning against PostgreSQL."""

from __future__ import annotations

import asyncio
import uuid

import pytest

from shared_kernel.auth import Claim, ClaimSet
from users.application.services import UserService
from users.infrastructure.user_repository import UserRepository

pytestmark = pytest.mark.integration


def _claims_for(subject: uuid.UUID) -> ClaimSet:
    return ClaimSet((Claim("sub", str(subject)), Claim("email", "it@example.com")))


def _service(session) -> UserService:
    return UserService(user_repository=UserRepository(session=session), session=session)


class TestProvisioning:
    """Tests for get_or_provision."""

    @pytest.mark.asyncio
    async def test_provisioning_is_idempotent(self, async_session):
        service = _service(async_session)
        claims = _claims_for(uuid.uuid4())

        first = await service.get_or_provision(claims)
        second = await service.get_or_provision(claims)

        assert first is not None
        assert first == second
        assert first.created_at == second.created_at
        assert len(await service.list_users()) == 1

    @pytest.mark.asyncio
    async def test_concurrent_first_requests_create_one_row(self, session_factory):
        claims = _claims_for(uuid.uuid4())

        async def provision():
            async with session_factory() as session:
                return await _service(session).get_or_provision(claims)

        results = await asyncio.gather(*(provision() for _ in range(5)))

        assert all(result is not None for result in results)
        assert len({result.created_at for result in results}) == 1

        async with session_factory() as session:
            assert len(await _service(session).list_users()) == 1

    @pytest.mark.asyncio
    async def test_anonymous_caller_creates_nothing(self, async_session):
        service = _service(async_session)

        assert await service.get_or_provision(ClaimSet.anonymous()) is None
        assert await service.list_users() == []

    @pytest.mark.asyncio
    async def test_wipe_then_reprovision(self, session_factory):
        claims = _claims_for(uuid.uuid4())
        async with session_factory() as session:
            service = _service(session)
            original = await service.get_or_provision(claims)
            assert await service.wipe_users() == 1

        async with session_factory() as session:
            recreated = await _service(session).get_or_provision(claims)

        assert recreated is not None
        assert recreated == original
        assert recreated.created_at >= original.created_at
