"""Integration tests for spot search, nearby, detail, and location endpoints."""

from unittest.mock import AsyncMock

from spots_api.lib.errors import ConfigurationError, NetworkError
from spots_api.lib.places.base import Coordinate, NearbyPage, PlaceCandidate, PlaceRecord
from spots_api.schemas.spots import SpotUpsert
from spots_api.services.spot_service import upsert_spot


def _record(place_id: str, latitude: float = 37.7759, photo_reference: str | None = None) -> PlaceRecord:
    return PlaceRecord(
        place_id=place_id,
        name=f"Place {place_id}",
        latitude=latitude,
        longitude=-122.4194,
        address="1 Market St, San Francisco, CA",
        city="San Francisco",
        types=["cafe"],
        category="Cafe",
        photo_reference=photo_reference,
    )


class TestSearchEndpoint:
    """GET /api/v1/spots/search."""

    async def test_results_sorted_with_distance(self, client, provider) -> None:
        provider.autocomplete.return_value = [
            PlaceCandidate(place_id="far", name="Far Cafe", latitude=37.80, longitude=-122.4194),
            PlaceCandidate(place_id="near", name="Near Cafe", latitude=37.776, longitude=-122.4194),
        ]

        response = await client.get("/api/v1/spots/search", params={"q": "cafe", "lat": 37.7749, "lng": -122.4194})

        assert response.status_code == 200
        body = response.json()
        assert body["query"] == "cafe"
        assert [r["place_id"] for r in body["results"]] == ["near", "far"]
        assert body["results"][0]["distance_meters"] > 0

    async def test_without_origin(self, client, provider) -> None:
        provider.autocomplete.return_value = [PlaceCandidate(place_id="a", name="A")]

        response = await client.get("/api/v1/spots/search", params={"q": "a"})

        assert response.status_code == 200
        assert response.json()["results"][0]["distance_meters"] is None
        provider.fetch_coordinate.assert_not_called()

    async def test_blank_query_returns_nothing(self, client, provider) -> None:
        response = await client.get("/api/v1/spots/search", params={"q": "   "})
        assert response.status_code == 200
        assert response.json()["results"] == []
        provider.autocomplete.assert_not_called()

    async def test_lat_without_lng(self, client) -> None:
        response = await client.get("/api/v1/spots/search", params={"q": "cafe", "lat": 37.7})
        assert response.status_code == 422

    async def test_missing_key_is_503(self, client, provider) -> None:
        provider.autocomplete.side_effect = ConfigurationError("GOOGLE_PLACES_API_KEY is not set")
        response = await client.get("/api/v1/spots/search", params={"q": "cafe"})
        assert response.status_code == 503

    async def test_upstream_failure_is_502(self, client, provider) -> None:
        provider.autocomplete.side_effect = NetworkError("google_places", "HTTP 500", status_code=500)
        response = await client.get("/api/v1/spots/search", params={"q": "cafe"})
        assert response.status_code == 502


class TestNearbyEndpoint:
    """GET /api/v1/spots/nearby."""

    async def test_nearby_page(self, client, provider, runner) -> None:
        provider.search_nearby.return_value = NearbyPage(
            places=[_record("far", 37.79, "places/far/photos/1"), _record("near", 37.7751)],
            next_page_token="next",
        )

        response = await client.get("/api/v1/spots/nearby", params={"lat": 37.7749, "lng": -122.4194})

        assert response.status_code == 200
        body = response.json()
        assert [spot["place_id"] for spot in body["spots"]] == ["near", "far"]
        assert body["next_page_token"] == "next"
        assert body["spots"][0]["category"] == "Cafe"
        runner.submit_task.assert_called_once()

    async def test_uses_configured_defaults(self, client, provider, settings) -> None:
        provider.search_nearby.return_value = NearbyPage(places=[])

        await client.get("/api/v1/spots/nearby", params={"lat": 37.7749, "lng": -122.4194, "page_token": "t"})

        provider.search_nearby.assert_awaited_once_with(
            Coordinate(37.7749, -122.4194),
            radius_meters=settings.places_nearby_radius_meters,
            max_results=settings.places_nearby_page_size,
            page_token="t",
        )

    async def test_page_size_capped_at_20(self, client) -> None:
        response = await client.get(
            "/api/v1/spots/nearby", params={"lat": 37.7749, "lng": -122.4194, "max_results": 21}
        )
        assert response.status_code == 422

    async def test_requires_origin(self, client) -> None:
        response = await client.get("/api/v1/spots/nearby", params={"lat": 37.7749})
        assert response.status_code == 422


class TestSpotDetailEndpoint:
    """GET /api/v1/spots/{place_id}."""

    async def test_stored_spot_served_without_provider(self, client, provider, async_session) -> None:
        await upsert_spot(
            async_session,
            SpotUpsert(
                place_id="stored",
                name="Stored",
                latitude=37.7759,
                longitude=-122.4194,
                photo_url="https://cdn.example.com/spot-images/stored.jpg",
            ),
        )
        await async_session.commit()

        response = await client.get("/api/v1/spots/stored", params={"lat": 37.7749, "lng": -122.4194})

        assert response.status_code == 200
        body = response.json()
        assert body["name"] == "Stored"
        assert body["distance_text"] is not None
        provider.fetch_place.assert_not_called()

    async def test_fetches_and_queues_photo(self, client, provider, runner) -> None:
        provider.fetch_place = AsyncMock(return_value=_record("fresh", photo_reference="places/fresh/photos/1"))

        response = await client.get("/api/v1/spots/fresh")

        assert response.status_code == 200
        assert response.json()["photo_url"] is None
        runner.submit_task.assert_called_once()

    async def test_unknown_place_is_404(self, client, provider) -> None:
        response = await client.get("/api/v1/spots/nope")
        assert response.status_code == 404


class TestLocationEndpoint:
    """PATCH /api/v1/spots/{place_id}/location."""

    async def test_updates_location(self, client, async_session) -> None:
        await upsert_spot(async_session, SpotUpsert(place_id="p", name="P", latitude=1.0, longitude=1.0))
        await async_session.commit()

        response = await client.patch("/api/v1/spots/p/location", json={"latitude": 2.5, "longitude": 3.5})

        assert response.status_code == 200
        assert response.json()["latitude"] == 2.5

    async def test_unknown_spot_is_404(self, client) -> None:
        response = await client.patch("/api/v1/spots/nope/location", json={"latitude": 2.5, "longitude": 3.5})
        assert response.status_code == 404

    async def test_out_of_range_is_422(self, client) -> None:
        response = await client.patch("/api/v1/spots/p/location", json={"latitude": 95, "longitude": 3.5})
        assert response.status_code == 422
