"""Main FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from infrastructure.database.dependencies import close_database_connections
from infrastructure.logging import configure_logging
from infrastructure.observability import DefaultStartupProbe
from infrastructure.settings import get_settings
from infrastructure.version import __version__
from users.presentation import register_error_handlers
from users.presentation import router as users_router


@asynccontextmanager
async def user_service_lifespan(app: FastAPI):
    """Application lifespan context.

    Manages:
    - Logging configuration
    - Database engine disposal on shutdown (the engine is created lazily)
    """
    settings = get_settings()
    configure_logging(settings.log_level)
    probe = DefaultStartupProbe()

    probe.service_started(version=__version__, environment=settings.environment)
    if settings.is_development:
        probe.destructive_operations_enabled(environment=settings.environment)

    yield

    await close_database_connections()
    probe.service_stopped()


app = FastAPI(
    title=get_settings().app_name,
    description="JIT user provisioning for identities issued by an external OIDC provider",
    version=__version__,
    lifespan=user_service_lifespan,
)

register_error_handlers(app)

app.include_router(users_router)


@app.get("/", include_in_schema=False)
def root() -> RedirectResponse:
    """Redirect to the interactive API documentation."""
    return RedirectResponse(url="/docs")


@app.get("/health")
def health():
    """Basic health check endpoint."""
    return {"status": "ok"}
