"""PostgreSQL implementation of IUserRepository.

Single-table repository for JIT-provisioned users. Driver and ORM
exceptions are translated into the storage errors declared in
``users.ports.exceptions`` so callers never handle SQLAlchemy types.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from users.domain.aggregates import User
from users.domain.value_objects import UserId
from users.infrastructure.models import UserModel
from users.infrastructure.observability import (
    DefaultUserRepositoryProbe,
    UserRepositoryProbe,
)
from users.ports.exceptions import (
    ConcurrencyConflictError,
    DuplicateEntityError,
    EntityNotFoundError,
    InvalidArgumentError,
    StorageError,
)
from users.ports.repositories import IUserRepository

_ENTITY = "User"
_UNIQUE_VIOLATION = "23505"


class UserRepository(IUserRepository):
    """PostgreSQL-backed repository for User aggregates.

    The repository never opens or commits transactions. Writes are flushed
    so constraint violations surface here; the caller decides whether to
    commit or roll back.
    """

    def __init__(
        self, session: AsyncSession, probe: UserRepositoryProbe | None = None
    ) -> None:
        """Initialize repository with database session and probe.

        Args:
            session: AsyncSession from FastAPI dependency injection
            probe: Optional domain probe for observability
        """
        self._session = session
        self._probe = probe or DefaultUserRepositoryProbe()

    async def find_by_external_user_id(self, user_id: UserId) -> User | None:
        """Retrieve a user by their external (subject) id.

        Args:
            user_id: The identity provider's subject id

        Returns:
            The User aggregate, or None if not found

        Raises:
            InvalidArgumentError: If user_id is None
            StorageError: If the lookup fails
        """
        if user_id is None:
            raise InvalidArgumentError("user_id must not be None")

        with self._storage_errors("find_by_external_user_id"):
            stmt = select(UserModel).where(
                UserModel.external_user_id == user_id.value
            )
            result = await self._session.execute(stmt)
            model = result.scalar_one_or_none()

        if model is None:
            self._probe.user_not_found(str(user_id))
            return None

        self._probe.user_retrieved(str(user_id))
        return self._to_domain(model)

    async def list_all(self) -> list[User]:
        """Retrieve every user, oldest first.

        Returns:
            List of User aggregates (empty if there are none)
        """
        with self._storage_errors("list_all"):
            stmt = select(UserModel).order_by(
                UserModel.created_at, UserModel.external_user_id
            )
            result = await self._session.execute(stmt)
            models = result.scalars().all()

        users = [self._to_domain(model) for model in models]
        self._probe.users_listed(len(users))
        return users

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
        if user is None:
            raise InvalidArgumentError("user must not be None")

        with self._storage_errors("insert"):
            model = UserModel(
                external_user_id=user.id.value,
                created_at=user.created_at,
            )
            self._session.add(model)
            await self._session.flush()

        self._probe.user_inserted(str(user.id))
        return self._to_domain(model)

    async def update(self, user: User) -> User:
        """Update an existing user row.

        The only stored attribute besides the key is ``created_at``, which is
        immutable, so an update confirms the row still exists and returns it
        as persisted.

        Args:
            user: The User aggregate to update

        Returns:
            The User as stored

        Raises:
            InvalidArgumentError: If user is None
            EntityNotFoundError: If no row has the user's id
            ConcurrencyConflictError: If the row changed concurrently
            StorageError: If the update fails for another reason
        """
        if user is None:
            raise InvalidArgumentError("user must not be None")

        with self._storage_errors("update"):
            model = await self._session.get(UserModel, user.id.value)
            if model is None:
                raise EntityNotFoundError(
                    "update", _ENTITY, f"User with external ID {user.id} does not exist"
                )
            await self._session.flush()

        self._probe.user_updated(str(user.id))
        return self._to_domain(model)

    async def delete(self, user_id: UserId) -> bool:
        """Delete one user row.

        Args:
            user_id: The subject id of the user to delete

        Returns:
            True if a row was removed, False if none matched

        Raises:
            InvalidArgumentError: If user_id is None
            StorageError: If the delete fails
        """
        if user_id is None:
            raise InvalidArgumentError("user_id must not be None")

        with self._storage_errors("delete"):
            stmt = delete(UserModel).where(
                UserModel.external_user_id == user_id.value
            )
            result = await self._session.execute(stmt)

        deleted = bool(result.rowcount)
        self._probe.user_deleted(str(user_id), deleted=deleted)
        return deleted

    async def wipe_all(self) -> int:
        """Delete every user row.

        Irreversible. Environment gating happens at the HTTP boundary.

        Returns:
            Number of rows removed
        """
        with self._storage_errors("wipe_all"):
            result = await self._session.execute(delete(UserModel))

        count = max(result.rowcount or 0, 0)
        self._probe.users_wiped(count)
        return count

    @contextmanager
    def _storage_errors(self, operation: str) -> Iterator[None]:
        """Translate exceptions raised inside the block into StorageError."""
        try:
            yield
        except StorageError as e:
            self._probe.storage_operation_failed(
                operation, error_kind=type(e).__name__, error=e.detail
            )
            raise
        except IntegrityError as e:
            if _is_unique_violation(e):
                self._probe.storage_operation_failed(
                    operation, error_kind="duplicate", error=str(e.orig)
                )
                raise DuplicateEntityError(
                    operation, _ENTITY, "A user with this external ID already exists"
                ) from e
            self._probe.storage_operation_failed(
                operation, error_kind="integrity", error=str(e.orig)
            )
            raise StorageError(operation, _ENTITY, str(e.orig)) from e
        except StaleDataError as e:
            self._probe.storage_operation_failed(
                operation, error_kind="concurrency", error=str(e)
            )
            raise ConcurrencyConflictError(
                operation, _ENTITY, "The user was modified by another process"
            ) from e
        except Exception as e:
            detail = str(e) or type(e).__name__
            self._probe.storage_operation_failed(
                operation, error_kind="storage", error=detail
            )
            raise StorageError(operation, _ENTITY, detail) from e

    @staticmethod
    def _to_domain(model: UserModel) -> User:
        return User(
            id=UserId(value=model.external_user_id),
            created_at=model.created_at,
        )


def _is_unique_violation(error: IntegrityError) -> bool:
    """Whether an IntegrityError was caused by a unique/primary key clash."""
    orig = error.orig
    for attr in ("sqlstate", "pgcode"):
        if getattr(orig, attr, None) == _UNIQUE_VIOLATION:
            return True
    message = str(orig if orig is not None else error)
    return "duplicate key" in message or "UNIQUE constraint" in message
