"""Domain probe for user repository operations.

Following Domain-Oriented Observability patterns, this probe captures
domain-significant events related to user persistence.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class UserRepositoryProbe(Protocol):
    """Domain probe for user repository operations.

    Records domain events during user persistence operations.
    """

    def user_inserted(self, external_user_id: str) -> None:
        """Record that a user row was inserted."""
        ...

    def user_updated(self, external_user_id: str) -> None:
        """Record that a user row was updated."""
        ...

    def user_retrieved(self, external_user_id: str) -> None:
        """Record that a user was retrieved."""
        ...

    def user_not_found(self, external_user_id: str) -> None:
        """Record that a user was not found."""
        ...

    def users_listed(self, count: int) -> None:
        """Record that all users were listed."""
        ...

    def user_deleted(self, external_user_id: str, deleted: bool) -> None:
        """Record a single-user delete and whether a row matched."""
        ...

    def users_wiped(self, count: int) -> None:
        """Record that every user row was removed."""
        ...

    def storage_operation_failed(
        self, operation: str, error_kind: str, error: str
    ) -> None:
        """Record that a storage operation failed."""
        ...

    def with_context(self, context: ObservationContext) -> UserRepositoryProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultUserRepositoryProbe:
    """Default implementation of UserRepositoryProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        """Get context metadata as kwargs for logging."""
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultUserRepositoryProbe:
        """Create a new probe with observation context bound."""
        return DefaultUserRepositoryProbe(logger=self._logger, context=context)

    def user_inserted(self, external_user_id: str) -> None:
        """Record that a user row was inserted."""
        self._logger.info(
            "user_inserted",
            external_user_id=external_user_id,
            **self._get_context_kwargs(),
        )

    def user_updated(self, external_user_id: str) -> None:
        """Record that a user row was updated."""
        self._logger.info(
            "user_updated",
            external_user_id=external_user_id,
            **self._get_context_kwargs(),
        )

    def user_retrieved(self, external_user_id: str) -> None:
        """Record that a user was retrieved."""
        self._logger.debug(
            "user_retrieved",
            external_user_id=external_user_id,
            **self._get_context_kwargs(),
        )

    def user_not_found(self, external_user_id: str) -> None:
        """Record that a user was not found."""
        self._logger.debug(
            "user_not_found",
            external_user_id=external_user_id,
            **self._get_context_kwargs(),
        )

    def users_listed(self, count: int) -> None:
        """Record that all users were listed."""
        self._logger.debug(
            "users_listed",
            count=count,
            **self._get_context_kwargs(),
        )

    def user_deleted(self, external_user_id: str, deleted: bool) -> None:
        """Record a single-user delete and whether a row matched."""
        self._logger.info(
            "user_deleted",
            external_user_id=external_user_id,
            deleted=deleted,
            **self._get_context_kwargs(),
        )

    def users_wiped(self, count: int) -> None:
        """Record that every user row was removed."""
        self._logger.warning(
            "users_wiped",
            count=count,
            **self._get_context_kwargs(),
        )

    def storage_operation_failed(
        self, operation: str, error_kind: str, error: str
    ) -> None:
        """Record that a storage operation failed."""
        self._logger.error(
            "user_storage_operation_failed",
            operation=operation,
            error_kind=error_kind,
            error=error,
            **self._get_context_kwargs(),
        )
