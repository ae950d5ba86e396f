"""Translation of domain and storage errors into HTTP responses.

Errors raised on normal request paths propagate out of the route
handlers and are mapped to status codes here, so handlers do not need
their own try/except blocks for expected failures.
"""

from __future__ import annotations

from http import HTTPStatus

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from users.application.observability import (
    DefaultRequestErrorProbe,
    RequestErrorProbe,
)
from users.domain.exceptions import (
    DomainValidationError,
    MalformedIdentityError,
    MissingIdentityError,
)
from users.ports.exceptions import (
    ConcurrencyConflictError,
    DuplicateEntityError,
    EntityNotFoundError,
    InvalidArgumentError,
    StorageError,
)
from users.presentation.models import ErrorResponse

# Most specific first; the first matching entry wins.
_STATUS_BY_ERROR: tuple[tuple[type[Exception], int], ...] = (
    (EntityNotFoundError, 404),
    (DuplicateEntityError, 409),
    (ConcurrencyConflictError, 409),
    (StorageError, 500),
    (DomainValidationError, 400),
    (InvalidArgumentError, 400),
    (MissingIdentityError, 400),
    (MalformedIdentityError, 400),
)


def status_for(error: Exception) -> int:
    """Return the HTTP status code an error maps to."""
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return status_code
    return 500


def build_error_response(error: Exception) -> ErrorResponse:
    """Build the structured body for a translated error.

    Storage failures other than not-found/conflict hide their internal
    detail from the caller.
    """
    status_code = status_for(error)
    if status_code == 500:
        detail = "An unexpected storage error occurred."
    elif isinstance(error, StorageError):
        detail = error.detail
    else:
        detail = str(error)

    return ErrorResponse(
        title=HTTPStatus(status_code).phrase,
        status=status_code,
        detail=detail,
        errors=error.errors if isinstance(error, DomainValidationError) else None,
    )


def register_error_handlers(
    app: FastAPI, probe: RequestErrorProbe | None = None
) -> None:
    """Register exception handlers for users-context errors on ``app``.

    Args:
        app: The FastAPI application
        probe: Optional probe recording each translated error
    """
    error_probe = probe or DefaultRequestErrorProbe()

    async def handle(request: Request, exc: Exception) -> JSONResponse:
        body = build_error_response(exc)
        error_probe.request_failed(
            path=request.url.path,
            status_code=body.status,
            error_type=type(exc).__name__,
            detail=str(exc),
        )
        return JSONResponse(
            status_code=body.status,
            content=body.model_dump(exclude_none=True),
        )

    for error_type, _ in _STATUS_BY_ERROR:
        app.add_exception_handler(error_type, handle)
