"""Verified identity claims as an ordered multimap.

A JWT payload is a JSON object, but downstream code reasons about claims
the way identity frameworks expose them: a flat, ordered list of
``(type, value)`` string pairs in which a type may repeat (one entry per
group membership, for instance).
"""

from __future__ import annotations

import json
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from shared_kernel.auth.observability import JWTValidatorProbe

NAME_IDENTIFIER = "http://schemas.xmlsoap.org/ws/2005/05/identity/claims/nameidentifier"
EMAIL = "http://schemas.xmlsoap.org/ws/2005/05/identity/claims/emailaddress"
NAME = "http://schemas.xmlsoap.org/ws/2005/05/identity/claims/name"

REALM_ACCESS = "realm_access"
ROLES = "roles"


@dataclass(frozen=True)
class Claim:
    """A single name/value assertion about the caller."""

    type: str
    value: str


class ClaimSet:
    """Immutable, ordered multimap of verified claims.

    Claim types are matched case-insensitively. Values keep the order in
    which the identity provider asserted them.
    """

    __slots__ = ("_claims", "_authenticated")

    def __init__(self, claims: tuple[Claim, ...] = (), authenticated: bool = True):
        self._claims = tuple(claims)
        self._authenticated = authenticated

    @classmethod
    def anonymous(cls) -> ClaimSet:
        """Return an empty claim set for a caller without a verified identity."""
        return cls((), authenticated=False)

    @classmethod
    def from_payload(
        cls,
        payload: Mapping[str, Any],
        probe: JWTValidatorProbe | None = None,
    ) -> ClaimSet:
        """Flatten a decoded JWT payload into a claim set.

        Lists become one claim per element, nested objects are kept as JSON
        strings, and Keycloak's ``realm_access.roles`` are additionally
        exposed as ``roles`` claims.

        Args:
            payload: The verified token payload.
            probe: Optional probe notified when ``realm_access`` is malformed.

        Returns:
            An authenticated ClaimSet.
        """
        claims: list[Claim] = []
        for claim_type, raw in payload.items():
            if isinstance(raw, list):
                claims.extend(
                    Claim(claim_type, _stringify(item))
                    for item in raw
                    if item is not None
                )
            elif raw is not None:
                claims.append(Claim(claim_type, _stringify(raw)))

        claims.extend(_realm_roles(payload.get(REALM_ACCESS), claims, probe))
        return cls(tuple(claims))

    @property
    def is_authenticated(self) -> bool:
        return self._authenticated

    def find_first(self, claim_type: str) -> str | None:
        """Return the first value asserted for ``claim_type``, if any."""
        wanted = claim_type.casefold()
        for claim in self._claims:
            if claim.type.casefold() == wanted:
                return claim.value
        return None

    def find_all(self, claim_type: str) -> list[str]:
        """Return every value asserted for ``claim_type``, in order."""
        wanted = claim_type.casefold()
        return [claim.value for claim in self._claims if claim.type.casefold() == wanted]

    def __iter__(self) -> Iterator[Claim]:
        return iter(self._claims)

    def __len__(self) -> int:
        return len(self._claims)

    def __repr__(self) -> str:
        return f"ClaimSet(authenticated={self._authenticated}, claims={len(self._claims)})"


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"))
    return str(value)


def _realm_roles(
    realm_access: Any,
    existing: list[Claim],
    probe: JWTValidatorProbe | None,
) -> list[Claim]:
    """Expand ``realm_access.roles`` into ``roles`` claims not already present."""
    if realm_access is None:
        return []

    if isinstance(realm_access, str):
        try:
            realm_access = json.loads(realm_access)
        except json.JSONDecodeError as e:
            if probe is not None:
                probe.realm_roles_malformed(reason=f"Invalid JSON: {e}")
            return []

    roles = realm_access.get(ROLES) if isinstance(realm_access, dict) else None
    if not isinstance(roles, list):
        if probe is not None:
            probe.realm_roles_malformed(reason="realm_access has no roles array")
        return []

    seen = {c.value for c in existing if c.type.casefold() == ROLES}
    expanded: list[Claim] = []
    for role in roles:
        if not isinstance(role, str) or role in seen:
            continue
        seen.add(role)
        expanded.append(Claim(ROLES, role))
    return expanded
