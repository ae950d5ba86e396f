"""Domain probe for application startup and lifecycle events.

Following Domain-Oriented Observability patterns, this probe captures
domain-significant events during application initialization and shutdown.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class StartupProbe(Protocol):
    """Domain probe for application startup operations."""

    def service_started(self, version: str, environment: str) -> None:
        """Record that the service finished starting."""
        ...

    def destructive_operations_enabled(self, environment: str) -> None:
        """Record that administrative wipe is reachable in this environment."""
        ...

    def service_stopped(self) -> None:
        """Record that the service shut down."""
        ...

    def with_context(self, context: ObservationContext) -> StartupProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultStartupProbe:
    """Default implementation of StartupProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultStartupProbe:
        """Create a new probe with observation context bound."""
        return DefaultStartupProbe(logger=self._logger, context=context)

    def service_started(self, version: str, environment: str) -> None:
        self._logger.info(
            "service_started",
            version=version,
            environment=environment,
            **self._get_context_kwargs(),
        )

    def destructive_operations_enabled(self, environment: str) -> None:
        self._logger.warning(
            "destructive_operations_enabled",
            environment=environment,
            **self._get_context_kwargs(),
        )

    def service_stopped(self) -> None:
        self._logger.info("service_stopped", **self._get_context_kwargs())
