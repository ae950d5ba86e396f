"""User application service for the users bounded context.

Handles JIT (just-in-time) provisioning of callers and administrative
reads and wipes of the local user store.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from shared_kernel.auth.claims import ClaimSet
from users.application.claims import get_display_name, get_email, get_subject_id
from users.application.observability import DefaultUserServiceProbe, UserServiceProbe
from users.application.validators import UserValidator
from users.domain.aggregates import User
from users.domain.exceptions import UserDomainError
from users.domain.value_objects import UserId
from users.ports.exceptions import DuplicateEntityError
from users.ports.repositories import IUserRepository


class UserService:
    """Application service for user provisioning and administration.

    Owns the transaction boundary for each use case; the repository only
    flushes.
    """

    def __init__(
        self,
        user_repository: IUserRepository,
        session: AsyncSession,
        probe: UserServiceProbe | None = None,
        validator: UserValidator | None = None,
    ):
        """Initialize UserService with dependencies.

        Args:
            user_repository: Repository for user persistence
            session: Database session for transaction management
            probe: Optional domain probe for observability
            validator: Optional validator applied before inserts and lookups
        """
        self._user_repository = user_repository
        self._session = session
        self._probe = probe or DefaultUserServiceProbe()
        self._validator = validator or UserValidator()

    async def get_or_provision(self, claims: ClaimSet | None) -> User | None:
        """Return the caller's local user, creating it on first sight.

        Provisioning is a side effect of authentication, so this never
        raises: any failure is reported to the probe and yields None.

        Args:
            claims: The caller's verified claims, or None if unauthenticated

        Returns:
            The existing or newly created User, or None if no user could be
            provisioned
        """
        if claims is None or not claims.is_authenticated:
            self._probe.provisioning_skipped(reason="unauthenticated")
            return None

        name = get_display_name(claims)
        try:
            subject = get_subject_id(claims)
        except UserDomainError as e:
            self._probe.user_provision_failed(
                external_user_id=None, name=name, error=str(e)
            )
            return None

        user_id = UserId(value=subject)
        if user_id.is_nil:
            self._probe.provisioning_skipped(reason="nil subject id")
            return None

        try:
            return await self._find_or_insert(user_id, claims)
        except DuplicateEntityError:
            return await self._reread_after_race(user_id, name)
        except Exception as e:
            self._probe.user_provision_failed(
                external_user_id=str(user_id), name=name, error=str(e)
            )
            return None

    async def _find_or_insert(self, user_id: UserId, claims: ClaimSet) -> User:
        async with self._session.begin():
            existing = await self._user_repository.find_by_external_user_id(user_id)
            if existing is not None:
                self._probe.user_found(str(user_id))
                return existing

            self._probe.user_provisioning(
                external_user_id=str(user_id),
                email=get_email(claims),
                name=get_display_name(claims),
            )
            user = User(id=user_id, created_at=datetime.now(timezone.utc))
            self._validator.validate_user(user)
            created = await self._user_repository.insert(user)

        self._probe.user_provisioned(str(user_id))
        return created

    async def _reread_after_race(self, user_id: UserId, name: str | None) -> User | None:
        """Resolve a lost insert race by reading the row the winner created."""
        try:
            async with self._session.begin():
                existing = await self._user_repository.find_by_external_user_id(
                    user_id
                )
        except Exception as e:
            self._probe.user_provision_failed(
                external_user_id=str(user_id), name=name, error=str(e)
            )
            return None

        if existing is None:
            self._probe.user_provision_failed(
                external_user_id=str(user_id),
                name=name,
                error="duplicate insert reported but no row found",
            )
            return None

        self._probe.provisioning_race_resolved(str(user_id))
        return existing

    async def get_user_by_external_user_id(
        self, external_user_id: uuid.UUID
    ) -> User | None:
        """Look up a user by subject id.

        Args:
            external_user_id: The identity provider's subject id

        Returns:
            The User, or None if no row exists

        Raises:
            InvalidArgumentError: If the id is None or the nil UUID
            StorageError: If the lookup fails
        """
        self._validator.validate_external_user_id(external_user_id)
        async with self._session.begin():
            return await self._user_repository.find_by_external_user_id(
                UserId(value=external_user_id)
            )

    async def list_users(self) -> list[User]:
        """Return every local user, oldest first.

        Raises:
            StorageError: If the listing fails
        """
        async with self._session.begin():
            return await self._user_repository.list_all()

    async def wipe_users(self) -> int:
        """Remove every local user.

        Callers are responsible for environment gating.

        Returns:
            Number of users removed

        Raises:
            StorageError: If the wipe fails
        """
        async with self._session.begin():
            count = await self._user_repository.wipe_all()

        self._probe.users_wiped(count)
        return count
