"""Ports (interfaces) for the users bounded context.

Ports define the contracts for repositories without specifying
implementation details. This allows for dependency inversion and makes
the application layer independent of infrastructure.
"""

from users.ports.exceptions import (
    ConcurrencyConflictError,
    DuplicateEntityError,
    EntityNotFoundError,
    InvalidArgumentError,
    StorageError,
)
from users.ports.repositories import IUserRepository

__all__ = [
    "ConcurrencyConflictError",
    "DuplicateEntityError",
    "EntityNotFoundError",
    "IUserRepository",
    "InvalidArgumentError",
    "StorageError",
]
