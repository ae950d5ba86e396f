"""User aggregate for the users context."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from users.domain.value_objects import UserId


@dataclass(frozen=True)
class User:
    """Local record of an identity seen by this service.

    Carries no profile data. Name, email and roles are read from the token
    claims on every request; the row only exists so other records can
    reference the identity.
    """

    id: UserId
    created_at: datetime

    def __str__(self) -> str:
        """Return string representation."""
        return f"User({self.id})"

    def __eq__(self, other: object) -> bool:
        """Users are equal if they have the same ID (identity-based equality)."""
        if not isinstance(other, User):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        """Hash based on ID for use in sets and dicts."""
        return hash(self.id)
