"""Integration tests for photo mirroring endpoints."""

from unittest.mock import AsyncMock


class TestEnsurePhotoEndpoint:
    """POST /api/v1/photos/{place_id}."""

    async def test_returns_url(self, client, registry) -> None:
        registry.photo_service.ensure_photo = AsyncMock(return_value="https://cdn.example.com/spot-images/p.jpg")

        response = await client.post("/api/v1/photos/p", json={"photo_reference": "places/p/photos/1"})

        assert response.status_code == 200
        assert response.json() == {"place_id": "p", "photo_url": "https://cdn.example.com/spot-images/p.jpg"}
        registry.photo_service.ensure_photo.assert_awaited_once_with("p", "places/p/photos/1")

    async def test_failure_returns_null_url(self, client, registry) -> None:
        registry.photo_service.ensure_photo = AsyncMock(return_value=None)

        response = await client.post("/api/v1/photos/p", json={"photo_reference": "places/p/photos/1"})

        assert response.status_code == 200
        assert response.json()["photo_url"] is None

    async def test_reference_required(self, client) -> None:
        response = await client.post("/api/v1/photos/p", json={"photo_reference": ""})
        assert response.status_code == 422


class TestPhotoBatchEndpoint:
    """POST /api/v1/photos/batch."""

    async def test_batch_returns_successes(self, client, registry) -> None:
        registry.photo_service.ensure_photos = AsyncMock(return_value={"a": "https://cdn.example.com/spot-images/a.jpg"})

        response = await client.post(
            "/api/v1/photos/batch",
            json={"items": [{"place_id": "a", "photo_reference": "ref-a"}, {"place_id": "b", "photo_reference": "ref-b"}]},
        )

        assert response.status_code == 200
        assert response.json() == {"photos": {"a": "https://cdn.example.com/spot-images/a.jpg"}}
        registry.photo_service.ensure_photos.assert_awaited_once_with([("a", "ref-a"), ("b", "ref-b")])

    async def test_batch_route_not_shadowed_by_place_route(self, client, registry) -> None:
        registry.photo_service.ensure_photos = AsyncMock(return_value={})
        registry.photo_service.ensure_photo = AsyncMock()

        response = await client.post("/api/v1/photos/batch", json={"items": []})

        assert response.status_code == 200
        registry.photo_service.ensure_photo.assert_not_called()
