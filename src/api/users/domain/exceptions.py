"""Domain exceptions for the users bounded context."""

from __future__ import annotations


class UserDomainError(Exception):
    """Base class for domain rule violations in the users context."""

    pass


class MissingIdentityError(UserDomainError):
    """Raised when a claim set carries no subject identifier.

    Neither the name-identifier claim nor ``sub`` was asserted.
    """

    def __init__(self, message: str = "No subject identifier claim is present") -> None:
        super().__init__(message)


class MalformedIdentityError(UserDomainError):
    """Raised when a subject identifier is not a valid UUID."""

    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__(f"Subject identifier {value!r} is not a valid UUID")


class DomainValidationError(UserDomainError):
    """Raised when an entity breaks a business rule before persistence.

    Attributes:
        errors: Field name mapped to the messages describing each violation
        entity: Name of the entity that failed validation
    """

    def __init__(self, errors: dict[str, list[str]], entity: str) -> None:
        self.errors = errors
        self.entity = entity
        details = "; ".join(
            f"{field}: {', '.join(messages)}" for field, messages in errors.items()
        )
        super().__init__(f"{entity} validation failed: {details}")
