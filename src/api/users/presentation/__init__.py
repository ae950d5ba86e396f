"""Presentation layer for the users bounded context."""

from users.presentation.errors import register_error_handlers
from users.presentation.routes import router

__all__ = [
    "register_error_handlers",
    "router",
]
