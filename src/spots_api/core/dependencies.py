"""Service wiring and FastAPI dependency injection.

A ServiceRegistry holds the caches, upstream clients, and services of one
application (or CLI) run. The API lifespan stores it on ``app.state`` and the
getters below hand its members to route handlers, so caches are shared per
process but never module globals.
"""

from collections.abc import AsyncGenerator
from dataclasses import dataclass
from typing import Any

from fastapi import Request
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from spots_api.core.background import BackgroundTaskRunner, task_runner
from spots_api.core.config import Settings
from spots_api.core.database import get_session_factory
from spots_api.lib.cache import CoordinateCache, PhotoCache, ResponseCache
from spots_api.lib.membership import KeyedLock
from spots_api.lib.places import BasePlacesProvider, get_places_provider
from spots_api.lib.storage import create_storage_client
from spots_api.services.membership_service import MembershipService
from spots_api.services.photo_service import PhotoService
from spots_api.services.search_service import SearchService


@dataclass
class ServiceRegistry:
    """Process-wide collaborators built once per application run."""

    settings: Settings
    provider: BasePlacesProvider
    response_cache: ResponseCache
    coordinate_cache: CoordinateCache
    photo_cache: PhotoCache
    storage_client: Any | None
    search_service: SearchService
    photo_service: PhotoService
    membership_service: MembershipService
    task_runner: BackgroundTaskRunner


def build_service_registry(
    settings: Settings,
    session_factory: async_sessionmaker[AsyncSession],
    *,
    provider: BasePlacesProvider | None = None,
    storage_client: Any | None = None,
    runner: BackgroundTaskRunner | None = None,
) -> ServiceRegistry:
    """Create caches, clients, and services from settings.

    Args:
        settings: Application settings.
        session_factory: Factory for sessions opened by detached photo jobs.
        provider: Places provider override (tests).
        storage_client: S3 client override (tests). Built from settings when
            storage is configured, otherwise photo mirroring is disabled.
        runner: Background task runner override.

    Returns:
        A populated ServiceRegistry.
    """
    provider = provider or get_places_provider(settings)
    if storage_client is None and settings.storage_configured:
        storage_client = create_storage_client(
            endpoint_url=settings.storage_endpoint_url,  # type: ignore[arg-type]
            access_key_id=settings.storage_access_key_id,  # type: ignore[arg-type]
            secret_access_key=settings.storage_secret_access_key,  # type: ignore[arg-type]
            region_name=settings.storage_region,
        )
    if storage_client is None:
        logger.warning("Object storage is not configured; spot photos will not be mirrored")

    response_cache = ResponseCache(
        ttl_seconds=settings.search_cache_ttl_seconds,
        max_entries=settings.search_cache_max_entries,
    )
    coordinate_cache = CoordinateCache(max_entries=settings.coordinate_cache_max_entries)
    photo_cache = PhotoCache(
        max_entries=settings.photo_cache_max_entries,
        max_bytes=settings.photo_cache_max_bytes,
    )

    return ServiceRegistry(
        settings=settings,
        provider=provider,
        response_cache=response_cache,
        coordinate_cache=coordinate_cache,
        photo_cache=photo_cache,
        storage_client=storage_client,
        search_service=SearchService(
            provider,
            response_cache,
            coordinate_cache,
            result_limit=settings.places_search_result_limit,
            bias_radius_meters=settings.places_search_radius_meters,
        ),
        photo_service=PhotoService(
            provider,
            photo_cache,
            session_factory,
            storage_client,
            bucket=settings.storage_bucket,
            public_url=settings.storage_public_url,
            endpoint_url=settings.storage_endpoint_url,
            max_width=settings.places_photo_max_width,
            batch_size=settings.photo_batch_size,
        ),
        membership_service=MembershipService(KeyedLock()),
        task_runner=runner or task_runner,
    )


async def get_async_session() -> AsyncGenerator[AsyncSession]:
    """Yield an async database session with per-request lifecycle."""
    factory = get_session_factory()
    async with factory() as session:
        yield session


def get_registry(request: Request) -> ServiceRegistry:
    """Return the registry created by the application lifespan."""
    return request.app.state.registry


def get_settings_dep(request: Request) -> Settings:
    return get_registry(request).settings


def get_places_provider_dep(request: Request) -> BasePlacesProvider:
    return get_registry(request).provider


def get_search_service(request: Request) -> SearchService:
    return get_registry(request).search_service


def get_photo_service(request: Request) -> PhotoService:
    return get_registry(request).photo_service


def get_membership_service(request: Request) -> MembershipService:
    return get_registry(request).membership_service


def get_task_runner(request: Request) -> BackgroundTaskRunner:
    return get_registry(request).task_runner
