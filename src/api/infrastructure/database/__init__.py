"""Database infrastructure - shared connection primitives."""

from infrastructure.database.exceptions import (
    DatabaseConfigurationError,
    DatabaseError,
)

__all__ = [
    "DatabaseConfigurationError",
    "DatabaseError",
]
