"""Application services for the users bounded context."""

from users.application.services.user_service import UserService

__all__ = [
    "UserService",
]
