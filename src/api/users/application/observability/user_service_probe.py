"""Protocol for user application service observability.

Defines the interface for domain probes that capture application-level
domain events for provisioning and user administration.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class UserServiceProbe(Protocol):
    """Domain probe for user application service operations."""

    def provisioning_skipped(self, reason: str) -> None:
        """Record that no user could be provisioned for the caller."""
        ...

    def user_found(self, external_user_id: str) -> None:
        """Record that the caller already had a local user."""
        ...

    def user_provisioning(
        self,
        external_user_id: str,
        email: str | None,
        name: str | None,
    ) -> None:
        """Record that a new user is about to be created."""
        ...

    def user_provisioned(self, external_user_id: str) -> None:
        """Record that a new user was created."""
        ...

    def provisioning_race_resolved(self, external_user_id: str) -> None:
        """Record that a concurrent insert won and its row was re-read."""
        ...

    def user_provision_failed(
        self,
        external_user_id: str | None,
        name: str | None,
        error: str,
    ) -> None:
        """Record that user provisioning failed."""
        ...

    def users_wiped(self, count: int) -> None:
        """Record that every local user was removed."""
        ...

    def with_context(self, context: ObservationContext) -> UserServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultUserServiceProbe:
    """Default implementation of UserServiceProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultUserServiceProbe:
        """Create a new probe with observation context bound."""
        return DefaultUserServiceProbe(logger=self._logger, context=context)

    def provisioning_skipped(self, reason: str) -> None:
        """Record that no user could be provisioned for the caller."""
        self._logger.warning(
            "user_provisioning_skipped",
            reason=reason,
            **self._get_context_kwargs(),
        )

    def user_found(self, external_user_id: str) -> None:
        """Record that the caller already had a local user."""
        self._logger.debug(
            "user_found",
            external_user_id=external_user_id,
            **self._get_context_kwargs(),
        )

    def user_provisioning(
        self,
        external_user_id: str,
        email: str | None,
        name: str | None,
    ) -> None:
        """Record that a new user is about to be created."""
        self._logger.info(
            "user_provisioning",
            external_user_id=external_user_id,
            email=email,
            name=name,
            **self._get_context_kwargs(),
        )

    def user_provisioned(self, external_user_id: str) -> None:
        """Record that a new user was created."""
        self._logger.info(
            "user_provisioned",
            external_user_id=external_user_id,
            **self._get_context_kwargs(),
        )

    def provisioning_race_resolved(self, external_user_id: str) -> None:
        """Record that a concurrent insert won and its row was re-read."""
        self._logger.info(
            "user_provisioning_race_resolved",
            external_user_id=external_user_id,
            **self._get_context_kwargs(),
        )

    def user_provision_failed(
        self,
        external_user_id: str | None,
        name: str | None,
        error: str,
    ) -> None:
        """Record that user provisioning failed."""
        self._logger.error(
            "user_provision_failed",
            external_user_id=external_user_id,
            name=name,
            error=error,
            **self._get_context_kwargs(),
        )

    def users_wiped(self, count: int) -> None:
        """Record that every local user was removed."""
        self._logger.warning(
            "users_wiped",
            count=count,
            **self._get_context_kwargs(),
        )
