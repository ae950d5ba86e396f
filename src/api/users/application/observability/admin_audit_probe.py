"""Protocol for administrative audit observability.

Every attempt to use an administrative capability is recorded at warning
level with the actor's identity, whether it was allowed or not.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class AdminAuditProbe(Protocol):
    """Domain probe for administrative audit events."""

    def access_denied(
        self,
        actor_id: str | None,
        email: str | None,
        required_role: str,
        path: str,
    ) -> None:
        """Record that a caller without the required role was refused."""
        ...

    def wipe_denied(
        self,
        actor_id: str | None,
        email: str | None,
        groups: list[str],
        environment: str,
    ) -> None:
        """Record that a database wipe was refused for the environment."""
        ...

    def wipe_completed(
        self,
        actor_id: str | None,
        email: str | None,
        groups: list[str],
        environment: str,
        deleted_count: int,
    ) -> None:
        """Record that a database wipe ran."""
        ...

    def with_context(self, context: ObservationContext) -> AdminAuditProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultAdminAuditProbe:
    """Default implementation of AdminAuditProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultAdminAuditProbe:
        """Create a new probe with observation context bound."""
        return DefaultAdminAuditProbe(logger=self._logger, context=context)

    def access_denied(
        self,
        actor_id: str | None,
        email: str | None,
        required_role: str,
        path: str,
    ) -> None:
        self._logger.warning(
            "audit_admin_access_denied",
            actor_id=actor_id,
            email=email,
            required_role=required_role,
            path=path,
            **self._get_context_kwargs(),
        )

    def wipe_denied(
        self,
        actor_id: str | None,
        email: str | None,
        groups: list[str],
        environment: str,
    ) -> None:
        self._logger.warning(
            "audit_database_wipe_denied",
            actor_id=actor_id,
            email=email,
            groups=groups,
            **{**self._get_context_kwargs(), "environment": environment},
        )

    def wipe_completed(
        self,
        actor_id: str | None,
        email: str | None,
        groups: list[str],
        environment: str,
        deleted_count: int,
    ) -> None:
        self._logger.warning(
            "audit_database_wipe_completed",
            actor_id=actor_id,
            email=email,
            groups=groups,
            deleted_count=deleted_count,
            **{**self._get_context_kwargs(), "environment": environment},
        )
