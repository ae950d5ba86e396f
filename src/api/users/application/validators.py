"""Business-rule validation for users before persistence."""

from __future__ import annotations

import uuid

from users.domain.aggregates import User
from users.domain.exceptions import DomainValidationError
from users.ports.exceptions import InvalidArgumentError


class UserValidator:
    """Checks users and identifiers before they reach the repository."""

    def validate_user(self, user: User | None) -> None:
        """Validate a user about to be persisted.

        Raises:
            InvalidArgumentError: If user is None
            DomainValidationError: If the user's id is the nil UUID
        """
        if user is None:
            raise InvalidArgumentError("user must not be None")

        errors: dict[str, list[str]] = {}
        if user.id.is_nil:
            errors.setdefault("external_user_id", []).append(
                "External user ID cannot be empty."
            )
        if user.created_at.tzinfo is None:
            errors.setdefault("created_at", []).append(
                "Creation time must be timezone-aware."
            )

        if errors:
            raise DomainValidationError(errors, entity="User")

    def validate_external_user_id(self, external_user_id: uuid.UUID | None) -> None:
        """Validate an id used for lookup.

        Raises:
            InvalidArgumentError: If the id is None or the nil UUID
        """
        if external_user_id is None or external_user_id == uuid.UUID(int=0):
            raise InvalidArgumentError("External user ID cannot be empty.")
