"""User service wiring and the per-request provisioning hook."""

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.database.dependencies import get_write_session
from shared_kernel.auth import ClaimSet
from users.application.observability import DefaultUserServiceProbe, UserServiceProbe
from users.application.services import UserService
from users.dependencies.authentication import get_optional_claims
from users.domain.aggregates import User
from users.infrastructure.user_repository import UserRepository

PROVISIONED_USER_KEY = "provisioned_user"


def get_user_service_probe() -> UserServiceProbe:
    """Get UserServiceProbe instance.

    Returns:
        DefaultUserServiceProbe instance for observability
    """
    return DefaultUserServiceProbe()


def get_user_repository(
    session: Annotated[AsyncSession, Depends(get_write_session)],
) -> UserRepository:
    """Get UserRepository instance.

    Args:
        session: Async database session

    Returns:
        UserRepository instance
    """
    return UserRepository(session=session)


def get_user_service(
    user_repo: Annotated[UserRepository, Depends(get_user_repository)],
    session: Annotated[AsyncSession, Depends(get_write_session)],
    probe: Annotated[UserServiceProbe, Depends(get_user_service_probe)],
) -> UserService:
    """Get UserService instance.

    Args:
        user_repo: User repository (shares session via FastAPI dependency caching)
        session: Database session for transaction management
        probe: User service probe for observability

    Returns:
        UserService instance
    """
    return UserService(user_repository=user_repo, session=session, probe=probe)


async def provision_current_user(
    request: Request,
    claims: Annotated[ClaimSet, Depends(get_optional_claims)],
    service: Annotated[UserService, Depends(get_user_service)],
) -> User | None:
    """JIT-provision the caller before the route handler runs.

    Registered as a router-level dependency. The provisioned user, when
    there is one, is stored on ``request.state.provisioned_user``. The
    request always continues; ``get_or_provision`` reports its own
    failures and returns None.

    Args:
        request: The incoming request
        claims: The caller's claims (anonymous if no token was sent)
        service: User service performing the get-or-create

    Returns:
        The provisioned User, or None
    """
    if not claims.is_authenticated:
        return None

    user = await service.get_or_provision(claims)
    if user is not None:
        setattr(request.state, PROVISIONED_USER_KEY, user)
    return user


def get_provisioned_user(request: Request) -> User | None:
    """Return the user stored by ``provision_current_user``, if any."""
    return getattr(request.state, PROVISIONED_USER_KEY, None)
