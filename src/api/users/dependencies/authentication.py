"""Bearer token authentication dependencies."""

from datetime import timedelta
from functools import lru_cache
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from infrastructure.settings import get_oidc_settings
from shared_kernel.auth import ClaimSet, InvalidTokenError, JWTValidator
from shared_kernel.auth.observability import DefaultJWTValidatorProbe
from users.application.claims import get_subject
from users.application.observability import (
    AuthenticationProbe,
    DefaultAuthenticationProbe,
)

# auto_error=False so a missing header reaches our own 401 handling
bearer_scheme = HTTPBearer(auto_error=False)


@lru_cache
def get_jwt_validator() -> JWTValidator:
    """Get cached JWT validator.

    Uses lru_cache to ensure a single JWTValidator instance is reused across
    requests, enabling reuse of the instance-level JWKS cache.

    Returns:
        JWTValidator instance configured from OIDC settings.
    """
    settings = get_oidc_settings()
    return JWTValidator(
        issuer_url=settings.issuer_url,
        audience=settings.audience,
        probe=DefaultJWTValidatorProbe(),
        additional_issuers=settings.additional_issuers,
        validate_audience=settings.validate_audience,
        jwks_cache_ttl=timedelta(seconds=settings.jwks_cache_ttl_seconds),
    )


def get_authentication_probe() -> AuthenticationProbe:
    """Get AuthenticationProbe instance.

    Returns:
        DefaultAuthenticationProbe instance for observability
    """
    return DefaultAuthenticationProbe()


async def get_optional_claims(
    validator: Annotated[JWTValidator, Depends(get_jwt_validator)],
    auth_probe: Annotated[AuthenticationProbe, Depends(get_authentication_probe)],
    credentials: Annotated[
        HTTPAuthorizationCredentials | None, Depends(bearer_scheme)
    ] = None,
) -> ClaimSet:
    """Validate the bearer token if one was sent.

    FastAPI caches the result per-request, so every dependency that needs
    the caller's claims shares one validation.

    Args:
        validator: JWT validator for token validation
        auth_probe: Authentication probe for observability
        credentials: Bearer credentials from the Authorization header

    Returns:
        The verified ClaimSet, or an anonymous one when no token was sent

    Raises:
        HTTPException 401: If a token was sent but is invalid
    """
    if credentials is None:
        return ClaimSet.anonymous()

    try:
        claims = await validator.validate_token(credentials.credentials)
    except InvalidTokenError as e:
        auth_probe.authentication_failed(reason=str(e))
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        ) from e

    auth_probe.user_authenticated(subject=get_subject(claims) or "")
    return claims


async def get_current_claims(
    claims: Annotated[ClaimSet, Depends(get_optional_claims)],
    auth_probe: Annotated[AuthenticationProbe, Depends(get_authentication_probe)],
) -> ClaimSet:
    """Require an authenticated caller.

    Raises:
        HTTPException 401: If no bearer token was sent
    """
    if not claims.is_authenticated:
        auth_probe.authentication_failed(reason="Missing authorization")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return claims
