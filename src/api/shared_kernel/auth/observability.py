"""Probe for bearer token verification.

Rejected tokens are warnings because they surface as 401 responses.
Signing-key retrieval is logged so an unreachable identity provider can
be told apart from bad tokens.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class JWTValidatorProbe(Protocol):
    """Probe for token verification and signing-key retrieval."""

    def token_validated(self, subject: str, claim_count: int) -> None:
        """A token verified and its claims were flattened."""
        ...

    def token_validation_failed(self, reason: str) -> None: ...

    def realm_roles_malformed(self, reason: str) -> None:
        """realm_access was present but no roles could be read from it."""
        ...

    def jwks_fetched(self, jwks_uri: str, key_count: int) -> None: ...

    def jwks_cache_hit(self) -> None: ...

    def jwks_fetch_failed(self, error: str) -> None:
        """Discovery or key retrieval failed; the token is rejected."""
        ...

    def with_context(self, context: ObservationContext) -> JWTValidatorProbe: ...


class DefaultJWTValidatorProbe:
    """structlog-backed JWTValidatorProbe."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultJWTValidatorProbe:
        return DefaultJWTValidatorProbe(logger=self._logger, context=context)

    def token_validated(self, subject: str, claim_count: int) -> None:
        self._logger.debug(
            "bearer_token_accepted",
            external_user_id=subject,
            claim_count=claim_count,
            **self._get_context_kwargs(),
        )

    def token_validation_failed(self, reason: str) -> None:
        self._logger.warning(
            "bearer_token_rejected",
            reason=reason,
            **self._get_context_kwargs(),
        )

    def realm_roles_malformed(self, reason: str) -> None:
        self._logger.warning(
            "realm_roles_ignored",
            reason=reason,
            **self._get_context_kwargs(),
        )

    def jwks_fetched(self, jwks_uri: str, key_count: int) -> None:
        self._logger.info(
            "signing_keys_fetched",
            jwks_uri=jwks_uri,
            key_count=key_count,
            **self._get_context_kwargs(),
        )

    def jwks_cache_hit(self) -> None:
        self._logger.debug("signing_keys_cached", **self._get_context_kwargs())

    def jwks_fetch_failed(self, error: str) -> None:
        self._logger.error(
            "signing_keys_unavailable",
            error=error,
            **self._get_context_kwargs(),
        )
