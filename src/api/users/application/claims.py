"""Canonical identity accessors over a verified claim set.

Identity providers disagree on whether they emit standard claim-type URIs
or short JWT names. Every fallback chain lives here so the rest of the
service never needs to know which provider issued a token.
"""

from __future__ import annotations

import uuid

from shared_kernel.auth.claims import EMAIL, NAME, NAME_IDENTIFIER, ClaimSet
from users.domain.exceptions import MalformedIdentityError, MissingIdentityError

SUBJECT = "sub"
EMAIL_SHORT = "email"
PREFERRED_USERNAME = "preferred_username"
NAME_SHORT = "name"
GROUPS = "groups"
ROLES = "roles"
ROLE = "role"


def get_subject_id(claims: ClaimSet) -> uuid.UUID:
    """Return the caller's subject id.

    The name-identifier claim takes precedence over ``sub``.

    Raises:
        MissingIdentityError: If neither claim is present
        MalformedIdentityError: If the value is not a UUID
    """
    raw = claims.find_first(NAME_IDENTIFIER)
    if raw is None:
        raw = claims.find_first(SUBJECT)
    if raw is None:
        raise MissingIdentityError()

    try:
        return uuid.UUID(raw.strip())
    except ValueError as e:
        raise MalformedIdentityError(raw) from e


def get_subject(claims: ClaimSet) -> str | None:
    """Return the raw subject claim value without parsing it, for audit records."""
    return _first_of(claims, NAME_IDENTIFIER, SUBJECT)


def get_email(claims: ClaimSet) -> str | None:
    """Return the caller's email address, if asserted."""
    return _first_of(claims, EMAIL, EMAIL_SHORT)


def get_display_name(claims: ClaimSet) -> str | None:
    """Return the caller's display name, if asserted."""
    return _first_of(claims, NAME, PREFERRED_USERNAME, NAME_SHORT)


def get_groups(claims: ClaimSet) -> list[str]:
    """Return every ``groups`` value in assertion order."""
    return claims.find_all(GROUPS)


def get_roles(claims: ClaimSet) -> list[str]:
    """Return distinct ``roles`` and ``role`` values in order of first appearance."""
    roles: list[str] = []
    for value in claims.find_all(ROLES) + claims.find_all(ROLE):
        if value not in roles:
            roles.append(value)
    return roles


def _first_of(claims: ClaimSet, *claim_types: str) -> str | None:
    for claim_type in claim_types:
        value = claims.find_first(claim_type)
        if value is not None:
            return value
    return None
