"""FastAPI application factory.

Creates the FastAPI app with lifespan management, exception handlers,
and OpenAPI metadata.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from loguru import logger

from spots_api.core.background import task_runner
from spots_api.core.config import get_settings
from spots_api.core.database import dispose_engine, get_session_factory, init_engine
from spots_api.core.dependencies import build_service_registry
from spots_api.core.logging import setup_logging
from spots_api.lib.errors import ConfigurationError, NetworkError, NotFoundError


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Manage application lifecycle: init engine and services on startup, drain and dispose on shutdown."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_dir)
    init_engine(settings.database_url, echo=False, schema=settings.database_schema)
    app.state.registry = build_service_registry(settings, get_session_factory(), runner=task_runner)
    logger.info(f"Spots API started ({settings.environment})")

    yield

    # Let in-flight photo uploads finish before connections go away
    await task_runner.drain(settings.background_drain_timeout)
    await dispose_engine()


def register_exception_handlers(app: FastAPI) -> None:
    """Map domain errors to HTTP responses."""

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": str(exc)},
        )

    @app.exception_handler(ConfigurationError)
    async def configuration_error_handler(request: Request, exc: ConfigurationError) -> JSONResponse:
        logger.error(f"Configuration error on {request.url.path}: {exc}")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"detail": "Upstream service is not configured."},
        )

    @app.exception_handler(NetworkError)
    async def network_error_handler(request: Request, exc: NetworkError) -> JSONResponse:
        logger.warning(f"Upstream failure on {request.url.path}: {exc}")
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content={"detail": f"{exc.provider_name} is temporarily unavailable. Please retry later."},
        )

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"detail": str(exc)},
        )


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    settings = get_settings()

    app = FastAPI(
        title="Spots API",
        description="Place discovery, photo mirroring, and saved-list synchronization",
        version="0.1.0",
        lifespan=lifespan,
    )

    register_exception_handlers(app)

    from spots_api.api.router import create_router

    app.include_router(create_router(settings))

    return app
