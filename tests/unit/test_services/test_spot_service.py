"""Tests for the spot service against in-memory SQLite."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from spots_api.lib.places.base import PlaceRecord
from spots_api.schemas.spots import SpotUpsert
from spots_api.services.spot_service import (
    bulk_upsert_spots,
    get_or_fetch_spot,
    get_photo_urls,
    get_spot,
    get_spot_photo_url,
    get_spots_missing_photos,
    set_spot_photo,
    spot_from_place,
    update_spot_location,
    upsert_spot,
)


def _spot(place_id: str = "p1", **overrides) -> SpotUpsert:
    fields = {
        "place_id": place_id,
        "name": "Blue Bottle",
        "address": "66 Mint Street",
        "city": "San Francisco",
        "latitude": 37.7825,
        "longitude": -122.4075,
        "types": ["cafe"],
    }
    fields.update(overrides)
    return SpotUpsert(**fields)


class TestUpsertSpot:
    """Tests for upsert_spot."""

    async def test_inserts_new_spot(self, async_session) -> None:
        spot = await upsert_spot(async_session, _spot())
        await async_session.commit()
        assert spot.place_id == "p1"
        assert spot.types == ["cafe"]
        assert spot.created_at is not None

    async def test_updates_existing_fields(self, async_session) -> None:
        await upsert_spot(async_session, _spot())
        spot = await upsert_spot(async_session, _spot(name="Blue Bottle Coffee", latitude=37.0))
        await async_session.commit()
        assert spot.name == "Blue Bottle Coffee"
        assert spot.latitude == pytest.approx(37.0)

    async def test_null_photo_url_never_overwrites(self, async_session) -> None:
        await upsert_spot(async_session, _spot(photo_url="https://cdn/p1.jpg", photo_reference="ref-1"))
        spot = await upsert_spot(async_session, _spot(photo_url=None, photo_reference=None))
        await async_session.commit()
        assert spot.photo_url == "https://cdn/p1.jpg"
        assert spot.photo_reference == "ref-1"

    async def test_non_null_photo_url_replaces(self, async_session) -> None:
        await upsert_spot(async_session, _spot(photo_url="https://cdn/old.jpg"))
        spot = await upsert_spot(async_session, _spot(photo_url="https://cdn/new.jpg"))
        assert spot.photo_url == "https://cdn/new.jpg"

    async def test_null_city_keeps_stored_city(self, async_session) -> None:
        await upsert_spot(async_session, _spot(city="Oakland"))
        spot = await upsert_spot(async_session, _spot(city=None))
        assert spot.city == "Oakland"


class TestBulkUpsertSpots:
    """Tests for bulk_upsert_spots."""

    async def test_upserts_many_and_dedupes(self, async_session) -> None:
        count = await bulk_upsert_spots(
            async_session,
            [_spot("a"), _spot("b"), _spot("a", name="Second A")],
        )
        await async_session.commit()
        assert count == 2
        spot = await get_spot(async_session, "a")
        assert spot is not None
        assert spot.name == "Second A"

    async def test_keeps_photo_url_of_existing_rows(self, async_session) -> None:
        await upsert_spot(async_session, _spot("a", photo_url="https://cdn/a.jpg"))
        await async_session.commit()
        await bulk_upsert_spots(async_session, [_spot("a", photo_url=None)])
        await async_session.commit()
        assert await get_spot_photo_url(async_session, "a") == "https://cdn/a.jpg"

    async def test_empty_batch(self, async_session) -> None:
        assert await bulk_upsert_spots(async_session, []) == 0


class TestPhotoColumns:
    """Tests for photo URL reads and writes."""

    async def test_set_spot_photo_updates_only_photo_fields(self, async_session) -> None:
        await upsert_spot(async_session, _spot("a"))
        await async_session.commit()

        assert await set_spot_photo(async_session, "a", "https://cdn/a.jpg", "ref-a") is True
        await async_session.commit()

        spot = await get_spot(async_session, "a")
        assert spot is not None
        await async_session.refresh(spot)
        assert spot.photo_url == "https://cdn/a.jpg"
        assert spot.photo_reference == "ref-a"
        assert spot.name == "Blue Bottle"

    async def test_set_spot_photo_missing_row(self, async_session) -> None:
        assert await set_spot_photo(async_session, "missing", "https://cdn/x.jpg", "ref") is False

    async def test_empty_url_reads_as_none(self, async_session) -> None:
        await upsert_spot(async_session, _spot("a", photo_url=""))
        assert await get_spot_photo_url(async_session, "a") is None

    async def test_get_photo_urls(self, async_session) -> None:
        await bulk_upsert_spots(async_session, [_spot("a", photo_url="https://cdn/a.jpg"), _spot("b")])
        assert await get_photo_urls(async_session, ["a", "b", "c"]) == {"a": "https://cdn/a.jpg"}
        assert await get_photo_urls(async_session, []) == {}

    async def test_get_spots_missing_photos(self, async_session) -> None:
        await bulk_upsert_spots(
            async_session,
            [
                _spot("a", photo_reference="ref-a"),
                _spot("b", photo_reference="ref-b", photo_url="https://cdn/b.jpg"),
                _spot("c"),
            ],
        )
        await async_session.commit()
        assert await get_spots_missing_photos(async_session) == [("a", "ref-a")]


class TestUpdateSpotLocation:
    """Tests for update_spot_location."""

    async def test_moves_spot(self, async_session) -> None:
        await upsert_spot(async_session, _spot("a"))
        await async_session.commit()
        spot = await update_spot_location(async_session, "a", 40.0, -74.0)
        assert spot is not None
        assert (spot.latitude, spot.longitude) == (40.0, -74.0)

    async def test_missing_spot(self, async_session) -> None:
        assert await update_spot_location(async_session, "missing", 1.0, 1.0) is None


class TestGetOrFetchSpot:
    """Tests for get_or_fetch_spot."""

    def _provider(self, record: PlaceRecord | None) -> MagicMock:
        provider = MagicMock()
        provider.fetch_place = AsyncMock(return_value=record)
        return provider

    async def test_database_hit_skips_provider(self, async_session) -> None:
        await upsert_spot(async_session, _spot("a"))
        await async_session.commit()
        provider = self._provider(None)

        spot = await get_or_fetch_spot(async_session, provider, "a")

        assert spot is not None
        provider.fetch_place.assert_not_called()

    async def test_miss_fetches_and_stores(self, async_session) -> None:
        record = PlaceRecord(
            place_id="new",
            name="Tartine",
            latitude=37.76,
            longitude=-122.42,
            city="San Francisco",
            types=["bakery"],
            photo_reference="places/new/photos/x",
        )
        provider = self._provider(record)

        spot = await get_or_fetch_spot(async_session, provider, "new")

        assert spot is not None
        assert spot.name == "Tartine"
        assert spot.photo_reference == "places/new/photos/x"
        assert await get_spot(async_session, "new") is not None

    async def test_unknown_place(self, async_session) -> None:
        assert await get_or_fetch_spot(async_session, self._provider(None), "nope") is None


class TestSpotFromPlace:
    """Tests for spot_from_place."""

    def test_maps_fields(self) -> None:
        record = PlaceRecord(place_id="p", name="N", latitude=1.0, longitude=2.0, types=["park"], rating=4.0)
        spot = spot_from_place(record)
        assert spot.place_id == "p"
        assert spot.types == ["park"]
        assert spot.photo_url is None
