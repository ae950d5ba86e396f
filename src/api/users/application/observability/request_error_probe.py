"""Protocol for API error observability.

Captures errors translated into HTTP responses by the exception handlers.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class RequestErrorProbe(Protocol):
    """Domain probe for errors surfaced to API callers."""

    def request_failed(
        self,
        path: str,
        status_code: int,
        error_type: str,
        detail: str,
    ) -> None:
        """Record that a request ended in a translated error response."""
        ...

    def with_context(self, context: ObservationContext) -> RequestErrorProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultRequestErrorProbe:
    """Default implementation of RequestErrorProbe using structlog.

    Client errors log at warning level, server errors at error level.
    """

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

    def with_context(self, context: ObservationContext) -> DefaultRequestErrorProbe:
        """Create a new probe with observation context bound."""
        return DefaultRequestErrorProbe(logger=self._logger, context=context)

    def request_failed(
        self,
        path: str,
        status_code: int,
        error_type: str,
        detail: str,
    ) -> None:
        log = self._logger.error if status_code >= 500 else self._logger.warning
        log(
            "request_failed",
            path=path,
            status_code=status_code,
            error_type=error_type,
            detail=detail,
            **self._get_context_kwargs(),
        )
