"""Repository protocols (ports) for the users bounded context.

Repository protocols define the interface for persisting and retrieving
aggregates without tying the application layer to a storage engine.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from users.domain.aggregates import User
from users.domain.value_objects import UserId


@runtime_checkable
class IUserRepository(Protocol):
    """Repository for User aggregate persistence.

    Every operation either succeeds or raises a ``StorageError`` subclass;
    driver exceptions never escape. Transactions are owned by the caller.
    """

    async def find_by_external_user_id(self, user_id: UserId) -> User | None:
        """Retrieve a user by their external (subject) id.

        Args:
            user_id: The identity provider's subject id

        Returns:
            The User aggregate, or None if not found

        Raises:
            StorageError: If the lookup fails
        """
        ...

    async def list_all(self) -> list[User]:
        """Retrieve every user, oldest first."""
        ...

    async def insert(self, user: User) -> User:
        """Insert a new user row.

        Args:
            user: The User aggregate to persist

        Returns:
            The persisted User

        Raises:
            InvalidArgumentError: If user is None
            DuplicateEntityError: If a row with the same id already exists
            StorageError: If the insert fails for another reason
        """
        ...

    async def update(self, user: User) -> User:
        """Update an existing user row.

        ``created_at`` is never changed.

        Raises:
            InvalidArgumentError: If user is None
            EntityNotFoundError: If no row has the user's id
            ConcurrencyConflictError: If the row changed concurrently
            StorageError: If the update fails for another reason
        """
        ...

    async def delete(self, user_id: UserId) -> bool:
        """Delete one user row.

        Returns:
            True if a row was removed, False if none matched
        """
        ...

    async def wipe_all(self) -> int:
        """Delete every user row.

        Returns:
            Number of rows removed
        """
        ...
