"""Database-specific exceptions raised while wiring the persistence layer."""


class DatabaseError(Exception):
    """Base exception for database infrastructure."""

    pass


class DatabaseConfigurationError(DatabaseError):
    """Raised when database settings are missing or invalid."""

    pass
