"""Fixtures for API integration tests: an app wired to the SQLite test database."""

from collections.abc import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from spots_api.api.router import create_router
from spots_api.core.dependencies import build_service_registry, get_async_session
from spots_api.main import register_exception_handlers


@pytest.fixture
def provider() -> MagicMock:
    """A places provider whose calls each test configures."""
    mock = MagicMock()
    mock.provider_name = "google_places"
    mock.autocomplete = AsyncMock(return_value=[])
    mock.search_nearby = AsyncMock()
    mock.fetch_coordinate = AsyncMock(return_value=None)
    mock.fetch_place = AsyncMock(return_value=None)
    mock.fetch_photo = AsyncMock(return_value=None)
    return mock


@pytest.fixture
def runner() -> MagicMock:
    """A task runner that records submissions without running them."""
    mock = MagicMock()

    def _submit(coro, *, name=None):  # type: ignore[no-untyped-def]
        coro.close()
        return "job-1"

    mock.submit_task.side_effect = _submit
    return mock


@pytest.fixture
def registry(settings, session_factory, provider, runner):  # type: ignore[no-untyped-def]
    return build_service_registry(
        settings,
        session_factory,
        provider=provider,
        storage_client=MagicMock(),
        runner=runner,
    )


@pytest.fixture
def app(settings, session_factory, registry) -> FastAPI:  # type: ignore[no-untyped-def]
    app = FastAPI()
    register_exception_handlers(app)
    app.include_router(create_router(settings))
    app.state.registry = registry

    async def _session() -> AsyncGenerator:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_async_session] = _session
    return app


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
