"""Value objects for the users bounded context.

Value objects are immutable and defined by their attributes rather than identity.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass

from users.domain.exceptions import MalformedIdentityError


@dataclass(frozen=True)
class UserId:
    """Identifier for a user, issued by the external identity provider.

    Wraps the provider's subject id. Never generated locally.
    """

    value: uuid.UUID

    def __str__(self) -> str:
        """Return string representation."""
        return str(self.value)

    @property
    def is_nil(self) -> bool:
        """Whether this is the all-zero UUID, which names no identity."""
        return self.value == uuid.UUID(int=0)

    @classmethod
    def from_string(cls, value: str) -> UserId:
        """Create UserId from a subject id string.

        Args:
            value: String representation of a UUID

        Returns:
            UserId instance

        Raises:
            MalformedIdentityError: If value is not a valid UUID
        """
        try:
            return cls(value=uuid.UUID(value.strip()))
        except (ValueError, AttributeError, TypeError) as e:
            raise MalformedIdentityError(value) from e
