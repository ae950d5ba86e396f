"""Administrative access dependencies."""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status

from infrastructure.settings import get_settings
from shared_kernel.auth import ClaimSet
from shared_kernel.observability_context import ObservationContext
from users.application.authorization import has_required_role
from users.application.claims import get_email, get_subject
from users.application.observability import AdminAuditProbe, DefaultAdminAuditProbe
from users.dependencies.authentication import get_current_claims


def get_environment_name() -> str:
    """Name of the environment serving requests (e.g. Development)."""
    return get_settings().environment


def get_admin_role() -> str:
    """Role name that grants administrative access."""
    return get_settings().admin_role


def get_admin_audit_probe(
    request: Request,
    environment: Annotated[str, Depends(get_environment_name)],
) -> AdminAuditProbe:
    """Get an AdminAuditProbe bound to the current request.

    Args:
        request: The incoming request (its X-Request-ID header, if any,
            is attached to every audit event)
        environment: Current environment name

    Returns:
        DefaultAdminAuditProbe with observation context bound
    """
    context = ObservationContext(
        request_id=request.headers.get("X-Request-ID"),
        environment=environment,
    )
    return DefaultAdminAuditProbe().with_context(context)


async def require_admin(
    request: Request,
    claims: Annotated[ClaimSet, Depends(get_current_claims)],
    admin_role: Annotated[str, Depends(get_admin_role)],
    audit_probe: Annotated[AdminAuditProbe, Depends(get_admin_audit_probe)],
) -> ClaimSet:
    """Require the caller to hold the administrative role.

    Args:
        request: The incoming request
        claims: The authenticated caller's claims
        admin_role: Role name required
        audit_probe: Probe recording refused access

    Returns:
        The caller's claims

    Raises:
        HTTPException 403: If the caller lacks the role
    """
    if not has_required_role(claims, admin_role):
        audit_probe.access_denied(
            actor_id=get_subject(claims),
            email=get_email(claims),
            required_role=admin_role,
            path=request.url.path,
        )
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Insufficient permissions",
        )
    return claims
