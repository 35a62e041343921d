"""Unit tests for the search response TTL cache."""

from unittest.mock import patch

from spots_api.lib.cache import ResponseCache
from spots_api.lib.places.base import PlaceCandidate

_CLOCK = "spots_api.lib.cache.response.time.monotonic"


def _candidates(*ids: str) -> list[PlaceCandidate]:
    return [PlaceCandidate(place_id=pid, name=pid.title()) for pid in ids]


class TestResponseCache:
    """Tests for ResponseCache."""

    def test_miss(self) -> None:
        assert ResponseCache().get("coffee|-") is None

    def test_hit_within_ttl(self) -> None:
        cache = ResponseCache(ttl_seconds=180)
        with patch(_CLOCK, return_value=1000.0):
            cache.set("coffee|-", _candidates("a", "b"))
        with patch(_CLOCK, return_value=1179.9):
            result = cache.get("coffee|-")
        assert result is not None
        assert [c.place_id for c in result] == ["a", "b"]

    def test_expires_at_ttl(self) -> None:
        cache = ResponseCache(ttl_seconds=180)
        with patch(_CLOCK, return_value=1000.0):
            cache.set("coffee|-", _candidates("a"))
        with patch(_CLOCK, return_value=1180.0):
            assert cache.get("coffee|-") is None
        assert len(cache) == 0

    def test_returns_copy(self) -> None:
        cache = ResponseCache()
        cache.set("k", _candidates("a"))
        first = cache.get("k")
        assert first is not None
        first.append(PlaceCandidate(place_id="x", name="X"))
        second = cache.get("k")
        assert second is not None
        assert len(second) == 1

    def test_enriching_returned_candidate_leaves_cache_unchanged(self) -> None:
        cache = ResponseCache()
        stored = _candidates("a")
        cache.set("k", stored)
        stored[0].photo_url = "https://cdn.example.com/spot-images/a.jpg"

        first = cache.get("k")
        assert first is not None
        first[0].photo_url = "https://cdn.example.com/spot-images/other.jpg"
        first[0].latitude = 37.7

        second = cache.get("k")
        assert second is not None
        assert second[0].photo_url is None
        assert second[0].latitude is None

    def test_set_replaces_entry_and_refreshes_time(self) -> None:
        cache = ResponseCache(ttl_seconds=180)
        with patch(_CLOCK, return_value=0.0):
            cache.set("k", _candidates("a"))
        with patch(_CLOCK, return_value=100.0):
            cache.set("k", _candidates("b"))
        with patch(_CLOCK, return_value=250.0):
            result = cache.get("k")
        assert result is not None
        assert result[0].place_id == "b"

    def test_write_prunes_expired_entries(self) -> None:
        cache = ResponseCache(ttl_seconds=180)
        with patch(_CLOCK, return_value=0.0):
            cache.set("old", _candidates("a"))
        with patch(_CLOCK, return_value=200.0):
            cache.set("new", _candidates("b"))
        assert len(cache) == 1

    def test_max_entries_evicts_oldest(self) -> None:
        cache = ResponseCache(ttl_seconds=180, max_entries=2)
        cache.set("a", _candidates("a"))
        cache.set("b", _candidates("b"))
        cache.set("c", _candidates("c"))
        assert cache.get("a") is None
        assert cache.get("b") is not None
        assert cache.get("c") is not None

    def test_empty_result_is_cached(self) -> None:
        cache = ResponseCache()
        cache.set("nothing|-", [])
        assert cache.get("nothing|-") == []

    def test_invalidate(self) -> None:
        cache = ResponseCache()
        cache.set("k", _candidates("a"))
        cache.invalidate()
        assert cache.get("k") is None
