"""HTTP routes for the local user store."""

from __future__ import annotations

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Path, Response, status
from fastapi.responses import JSONResponse

from shared_kernel.auth import ClaimSet
from users.application.authorization import is_wipe_allowed
from users.application.claims import (
    get_email,
    get_groups,
    get_subject,
    get_subject_id,
)
from users.application.observability import AdminAuditProbe
from users.application.services import UserService
from users.dependencies.authentication import get_current_claims
from users.dependencies.authorization import (
    get_admin_audit_probe,
    get_environment_name,
    require_admin,
)
from users.dependencies.user import get_user_service, provision_current_user
from users.ports.exceptions import EntityNotFoundError
from users.presentation.models import (
    ClaimsSummaryResponse,
    CurrentUserResponse,
    ErrorResponse,
    UserResponse,
    WipeDeniedResponse,
)

WIPE_DENIED_MESSAGE = (
    "Wiping the database is only allowed in development environments."
)

router = APIRouter(
    prefix="/api/user",
    tags=["users"],
    dependencies=[Depends(provision_current_user)],
)


@router.get("/me")
async def get_me(
    claims: Annotated[ClaimSet, Depends(get_current_claims)],
    service: Annotated[UserService, Depends(get_user_service)],
) -> CurrentUserResponse:
    """Return the caller's claims and their local user record.

    Never 404s: ``user`` is null when no local record exists. A missing
    or malformed subject claim propagates and is translated to 400.

    Args:
        claims: The authenticated caller's claims
        service: User service

    Returns:
        CurrentUserResponse with a claim summary and the local user, if any
    """
    external_user_id = get_subject_id(claims)

    user = None
    if external_user_id.int != 0:
        user = await service.get_user_by_external_user_id(external_user_id)

    return CurrentUserResponse(
        claims=ClaimsSummaryResponse.from_claims(claims, external_user_id),
        user=UserResponse.from_domain(user) if user is not None else None,
    )


@router.get(
    "/external/{externalUserId}",
    responses={404: {"model": ErrorResponse}},
)
async def get_user_by_external_id(
    external_user_id: Annotated[uuid.UUID, Path(alias="externalUserId")],
    _: Annotated[ClaimSet, Depends(require_admin)],
    service: Annotated[UserService, Depends(get_user_service)],
) -> UserResponse:
    """Get a local user by subject id (administrators only).

    Args:
        external_user_id: Subject id of the user
        service: User service

    Returns:
        UserResponse for the user

    Raises:
        EntityNotFoundError: If no local user has that id (translated to 404)
    """
    user = await service.get_user_by_external_user_id(external_user_id)
    if user is None:
        raise EntityNotFoundError(
            "get_user_by_external_id",
            "User",
            f"User with external ID {external_user_id} was not found.",
        )
    return UserResponse.from_domain(user)


@router.get("")
async def list_users(
    _: Annotated[ClaimSet, Depends(require_admin)],
    service: Annotated[UserService, Depends(get_user_service)],
) -> list[UserResponse]:
    """List every local user (administrators only).

    Args:
        service: User service

    Returns:
        List of UserResponse, possibly empty
    """
    users = await service.list_users()
    return [UserResponse.from_domain(user) for user in users]


@router.delete(
    "/wipe",
    status_code=status.HTTP_204_NO_CONTENT,
    response_model=None,
    responses={
        403: {
            "model": WipeDeniedResponse,
            "description": "Not allowed outside the Development environment",
        },
    },
)
async def wipe_users(
    claims: Annotated[ClaimSet, Depends(require_admin)],
    environment: Annotated[str, Depends(get_environment_name)],
    audit_probe: Annotated[AdminAuditProbe, Depends(get_admin_audit_probe)],
    service: Annotated[UserService, Depends(get_user_service)],
) -> Response:
    """Delete every local user (administrators, Development only).

    Both outcomes are audit-logged with the caller's identity.

    Args:
        claims: The administrator's claims
        environment: Current environment name
        audit_probe: Probe recording the audit trail
        service: User service

    Returns:
        204 No Content on success, 403 with a message outside Development
    """
    actor_id = get_subject(claims)
    email = get_email(claims)
    groups = get_groups(claims)

    if not is_wipe_allowed(environment):
        audit_probe.wipe_denied(
            actor_id=actor_id, email=email, groups=groups, environment=environment
        )
        return JSONResponse(
            status_code=status.HTTP_403_FORBIDDEN,
            content=WipeDeniedResponse(message=WIPE_DENIED_MESSAGE).model_dump(),
        )

    deleted_count = await service.wipe_users()
    audit_probe.wipe_completed(
        actor_id=actor_id,
        email=email,
        groups=groups,
        environment=environment,
        deleted_count=deleted_count,
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
