"""Domain-Oriented Observability for users infrastructure.

Probes for repository operations following Domain-Oriented Observability patterns.
"""

from users.infrastructure.observability.repository_probe import (
    DefaultUserRepositoryProbe,
    UserRepositoryProbe,
)

__all__ = [
    "UserRepositoryProbe",
    "DefaultUserRepositoryProbe",
]
