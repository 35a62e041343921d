"""Root API router with /api/v1 prefix."""

from fastapi import APIRouter

from spots_api.core.config import Settings


def create_router(settings: Settings) -> APIRouter:
    """Create the root API router with all sub-routers included.

    Args:
        settings: Application settings.

    Returns:
        Configured API router.
    """
    from spots_api.api.v1.lists import lists_router
    from spots_api.api.v1.photos import photos_router
    from spots_api.api.v1.spots import spots_router

    root_router = APIRouter(prefix=settings.api_v1_prefix)
    root_router.include_router(spots_router)
    root_router.include_router(photos_router)
    root_router.include_router(lists_router)

    return root_router
