"""Tests for the FastAPI application factory module."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from spots_api.core.config import Settings
from spots_api.lib.errors import ConfigurationError, NetworkError, NotFoundError
from spots_api.main import create_app, register_exception_handlers


def _settings() -> Settings:
    return Settings(database_url="sqlite+aiosqlite:///:memory:", google_places_api_key="test-key")


class TestCreateApp:
    """Tests for create_app."""

    @pytest.fixture
    def app(self):
        with patch("spots_api.main.get_settings", return_value=_settings()):
            return create_app()

    def test_app_is_created(self, app) -> None:
        assert app.title == "Spots API"

    def test_routes_registered(self, app) -> None:
        paths = {route.path for route in app.routes}
        assert "/api/v1/spots/search" in paths
        assert "/api/v1/spots/nearby" in paths
        assert "/api/v1/spots/{place_id}" in paths
        assert "/api/v1/photos/batch" in paths
        assert "/api/v1/spots/{place_id}/lists" in paths
        assert "/api/v1/users/{user_id}/lists" in paths

    def test_exception_handlers_registered(self, app) -> None:
        for exc_type in (ValueError, ConfigurationError, NetworkError, NotFoundError):
            assert app.exception_handlers.get(exc_type) is not None


class TestExceptionHandlers:
    """Domain errors map to HTTP status codes."""

    @pytest.fixture
    def client(self) -> TestClient:
        app = FastAPI()
        register_exception_handlers(app)

        @app.get("/value")
        async def value() -> None:
            raise ValueError("bad input")

        @app.get("/config")
        async def config() -> None:
            raise ConfigurationError("GOOGLE_PLACES_API_KEY is not set")

        @app.get("/network")
        async def network() -> None:
            raise NetworkError("google_places", "timed out")

        @app.get("/missing")
        async def missing() -> None:
            raise NotFoundError("Spot x does not exist")

        return TestClient(app, raise_server_exceptions=False)

    def test_value_error_is_400(self, client) -> None:
        response = client.get("/value")
        assert response.status_code == 400
        assert response.json()["detail"] == "bad input"

    def test_configuration_error_is_503_without_details(self, client) -> None:
        response = client.get("/config")
        assert response.status_code == 503
        assert "GOOGLE_PLACES_API_KEY" not in response.json()["detail"]

    def test_network_error_is_502(self, client) -> None:
        response = client.get("/network")
        assert response.status_code == 502
        assert "google_places" in response.json()["detail"]

    def test_not_found_is_404(self, client) -> None:
        response = client.get("/missing")
        assert response.status_code == 404


class TestAppLifespan:
    """Tests for lifespan management."""

    async def test_lifespan_builds_registry_and_drains(self) -> None:
        from spots_api.main import lifespan

        app = MagicMock()
        registry = MagicMock()

        with (
            patch("spots_api.main.get_settings", return_value=_settings()),
            patch("spots_api.main.setup_logging") as mock_setup_logging,
            patch("spots_api.main.init_engine") as mock_init_engine,
            patch("spots_api.main.get_session_factory"),
            patch("spots_api.main.build_service_registry", return_value=registry),
            patch("spots_api.main.task_runner") as mock_runner,
            patch("spots_api.main.dispose_engine", new_callable=AsyncMock) as mock_dispose,
        ):
            mock_runner.drain = AsyncMock()

            async with lifespan(app):
                mock_setup_logging.assert_called_once()
                mock_init_engine.assert_called_once()
                assert app.state.registry is registry

            mock_runner.drain.assert_awaited_once_with(30.0)
            mock_dispose.assert_awaited_once()
