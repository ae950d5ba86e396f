"""Repository-level exceptions for the users bounded context.

These exceptions describe storage failures in domain terms so the
application and presentation layers never see driver exceptions.
"""

from __future__ import annotations


class InvalidArgumentError(ValueError):
    """Raised when an operation receives a missing or unusable argument."""

    pass


class StorageError(Exception):
    """Raised when a storage operation fails.

    Attributes:
        operation: Name of the repository operation that failed
        entity: Name of the entity being stored or read
        detail: Human-readable description of the failure
    """

    def __init__(self, operation: str, entity: str, detail: str) -> None:
        self.operation = operation
        self.entity = entity
        self.detail = detail
        super().__init__(f"{operation} on {entity} failed: {detail}")


class DuplicateEntityError(StorageError):
    """Raised when an insert violates the uniqueness of the primary key.

    Two first-time requests for the same identity can race on insert;
    callers use this to tell that case apart from other storage failures.
    """

    pass


class EntityNotFoundError(StorageError):
    """Raised when an operation targets a row that does not exist."""

    pass


class ConcurrencyConflictError(StorageError):
    """Raised when a row was modified by another process mid-operation."""

    pass
