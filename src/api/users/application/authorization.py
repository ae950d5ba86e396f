"""Role evaluation over verified claims."""

from __future__ import annotations

from shared_kernel.auth.claims import ClaimSet

ADMIN_ROLE = "Admins"
USER_ROLE = "Users"

ROLE_CLAIM_TYPES = ("groups", "roles", "role")

DEVELOPMENT_ENVIRONMENT = "Development"


def has_required_role(claims: ClaimSet | None, role_name: str) -> bool:
    """Whether the caller holds ``role_name``.

    Membership may be asserted under ``groups``, ``roles`` or ``role`` and
    is compared case-insensitively.

    Args:
        claims: The caller's verified claims
        role_name: Role to look for, e.g. ``ADMIN_ROLE``

    Returns:
        True if the role appears under any recognized claim type
    """
    if claims is None or not claims.is_authenticated or not role_name:
        return False

    held = {
        value.casefold()
        for claim_type in ROLE_CLAIM_TYPES
        for value in claims.find_all(claim_type)
    }
    return role_name.casefold() in held


def is_wipe_allowed(environment: str) -> bool:
    """Whether destructive administrative operations may run in ``environment``."""
    return environment.casefold() == DEVELOPMENT_ENVIRONMENT.casefold()
