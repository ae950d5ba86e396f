"""Unit tests for UserValidator."""

from __future__ import annotations

import uuid
from datetime import datetime

import pytest

from users.application.validators import UserValidator
from users.domain.aggregates import User
from users.domain.exceptions import DomainValidationError
from users.domain.value_objects import UserId
from users.ports.exceptions import InvalidArgumentError


@pytest.fixture
def validator() -> UserValidator:
    return UserValidator()


class TestValidateUser:
    """Tests for validate_user."""

    def test_valid_user_passes(self, validator, subject_id, created_at):
        validator.validate_user(User(id=UserId(subject_id), created_at=created_at))

    def test_none_is_invalid_argument(self, validator):
        with pytest.raises(InvalidArgumentError):
            validator.validate_user(None)

    def test_nil_id_is_domain_violation(self, validator, created_at):
        user = User(id=UserId(uuid.UUID(int=0)), created_at=created_at)

        with pytest.raises(DomainValidationError) as exc_info:
            validator.validate_user(user)

        assert exc_info.value.entity == "User"
        assert "external_user_id" in exc_info.value.errors

    def test_naive_timestamp_is_domain_violation(self, validator, subject_id):
        user = User(id=UserId(subject_id), created_at=datetime(2026, 1, 1))

        with pytest.raises(DomainValidationError) as exc_info:
            validator.validate_user(user)

        assert "created_at" in exc_info.value.errors


class TestValidateExternalUserId:
    """Tests for validate_external_user_id."""

    def test_valid_id_passes(self, validator, subject_id):
        validator.validate_external_user_id(subject_id)

    @pytest.mark.parametrize("value", [None, uuid.UUID(int=0)])
    def test_empty_ids_are_rejected(self, validator, value):
        with pytest.raises(InvalidArgumentError):
            validator.validate_external_user_id(value)
