"""Unit test fixtures with mocked dependencies."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

import pytest

from shared_kernel.auth import Claim, ClaimSet

SUBJECT_ID = uuid.UUID("5b7e3c1a-2f4d-4c8e-9a1b-0d6f2e8c4a11")


def _build_claims(*pairs: tuple[str, str]) -> ClaimSet:
    return ClaimSet(tuple(Claim(claim_type, value) for claim_type, value in pairs))


@pytest.fixture
def make_claims():
    """Factory building an authenticated ClaimSet from (type, value) pairs."""
    return _build_claims


@pytest.fixture
def mock_db_settings():
    """Provide test database settings."""
    from infrastructure.settings import DatabaseSettings

    return DatabaseSettings(
        host="testhost",
        port=5432,
        database="testdb",
        username="testuser",
        password="testpass",
    )


@pytest.fixture
def subject_id() -> uuid.UUID:
    return SUBJECT_ID


@pytest.fixture
def user_claims() -> ClaimSet:
    """Claims for an ordinary authenticated user."""
    return _build_claims(
        ("sub", str(SUBJECT_ID)),
        ("email", "alice@example.com"),
        ("preferred_username", "alice"),
        ("groups", "Users"),
    )


@pytest.fixture
def admin_claims() -> ClaimSet:
    """Claims for an administrator."""
    return _build_claims(
        ("sub", str(SUBJECT_ID)),
        ("email", "admin@example.com"),
        ("preferred_username", "admin"),
        ("groups", "Users"),
        ("groups", "Admins"),
    )


@pytest.fixture
def created_at() -> datetime:
    return datetime(2026, 1, 5, 11, 19, 21, tzinfo=timezone.utc)
