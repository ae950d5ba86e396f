"""Observation context for domain-oriented observability.

Observation contexts collect and manage contextual metadata for instrumentation,
following the Domain Oriented Observability pattern.

See: https://martinfowler.com/articles/domain-oriented-observability.html
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ObservationContext:
    """Immutable context containing metadata for observability.

    Captures request-scoped metadata that should be included with all
    instrumentation events, so events emitted by different probes during
    the same request can be correlated.

    Attributes:
        request_id: Unique identifier for the current request/operation.
        external_user_id: Subject id of the caller (if known).
        environment: Name of the environment serving the request.
        extra: Additional contextual metadata.

    Example:
        context = ObservationContext(
            request_id="req-123",
            external_user_id="5b7e3c1a-...",
        )
        probe = DefaultUserServiceProbe().with_context(context)
    """

    request_id: str | None = None
    external_user_id: str | None = None
    environment: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        """Convert context to a dictionary for logging.

        Only includes non-None values to keep logs clean.
        """
        result: dict[str, Any] = {}
        if self.request_id is not None:
            result["request_id"] = self.request_id
        if self.external_user_id is not None:
            result["external_user_id"] = self.external_user_id
        if self.environment is not None:
            result["environment"] = self.environment
        result.update(self.extra)
        return result

