import logging
from contextlib import asynccontextmanager

import httpx
import logfire
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, RedirectResponse
from sqlalchemy.ext.asyncio import AsyncEngine

from changelogs.application.api.v1.errors import map_changelogs_error
from changelogs.application.api.v1.routes import auth, health, me, projects
from changelogs.application.di import create_container
from changelogs.config import Config, configure_logging
from changelogs.domain.shared.error import ChangelogsError, UnauthenticatedError
from changelogs.infrastructure.persistence.database import create_tables
from changelogs.util.di.fastapi import setup_dishka

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    container = app.state.dishka_container
    config = await container.get(Config)

    # Create missing tables before serving
    if config.database.auto_migrate:
        engine = await container.get(AsyncEngine)
        await create_tables(engine)
        logger.info("Database tables ensured")

    yield

    await container.close()


def create_app(
    config: Config | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Create FastAPI application.

    Args:
        config: Settings to run with; read from the environment when omitted
        transport: httpx transport for identity provider calls (tests only)
    """
    if config is None:
        # Pydantic Settings populates from env vars at runtime
        config = Config()  # type: ignore[call-arg]

    # Configure logging early
    configure_logging(config.logging)
    logger.info("Starting changelogs server: %s v%s", config.server.name, config.server.version)

    app_instance = FastAPI(
        title=config.server.name,
        description=config.server.description,
        version=config.server.version,
        lifespan=lifespan,
    )

    # Instrument FastAPI for automatic tracing of HTTP requests
    logfire.instrument_httpx()
    logfire.instrument_fastapi(app_instance)

    # Setup dependency injection
    container = create_container(config, transport=transport)
    setup_dishka(container, app_instance)

    # Browser-facing login flow lives at the site root
    app_instance.include_router(auth.router)

    # Register v1 routes with /api/v1 prefix
    app_instance.include_router(health.router, prefix="/api/v1")
    app_instance.include_router(me.router, prefix="/api/v1")
    app_instance.include_router(projects.router, prefix="/api/v1")

    login_path = config.frontend.login_path

    # No valid session - send the browser to log in
    @app_instance.exception_handler(UnauthenticatedError)
    async def unauthenticated_handler(request: Request, exc: UnauthenticatedError):
        logger.debug("Unauthenticated request to %s, redirecting to login", request.url.path)
        return RedirectResponse(url=login_path, status_code=302)

    # Global error handler - maps domain and infrastructure errors to HTTP responses
    @app_instance.exception_handler(ChangelogsError)
    async def changelogs_error_handler(request: Request, exc: ChangelogsError):
        http_exc = map_changelogs_error(exc)
        return JSONResponse(
            status_code=http_exc.status_code,
            content=http_exc.detail,
        )

    # Global exception handler - logs all unhandled exceptions
    @app_instance.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception(
            "Unhandled exception on %s %s",
            request.method,
            request.url.path,
        )
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"},
        )

    return app_instance


# Create app instance for uvicorn
app = create_app()
