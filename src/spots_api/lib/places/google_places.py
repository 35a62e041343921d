"""Google Places API (New) provider.

Uses the Places API v1 endpoints
(https://developers.google.com/maps/documentation/places/web-service/op-overview)
for autocomplete, nearby search, place details, and photo media.
Requires an API key sent in the ``X-Goog-Api-Key`` header.
"""

from typing import Any

import httpx
from loguru import logger

from spots_api.lib.errors import ConfigurationError, NetworkError
from spots_api.lib.places.base import BasePlacesProvider, Coordinate, NearbyPage, PlaceCandidate, PlaceRecord
from spots_api.lib.places.categories import categorize

PLACES_BASE_URL = "https://places.googleapis.com/v1"
AUTOCOMPLETE_URL = f"{PLACES_BASE_URL}/places:autocomplete"
NEARBY_SEARCH_URL = f"{PLACES_BASE_URL}/places:searchNearby"
DEFAULT_TIMEOUT = 10.0

NEARBY_FIELD_MASK = ",".join(
    [
        "places.id",
        "places.displayName",
        "places.formattedAddress",
        "places.shortFormattedAddress",
        "places.addressComponents",
        "places.location",
        "places.types",
        "places.rating",
        "places.photos",
        "nextPageToken",
    ]
)
DETAILS_FIELD_MASK = "id,displayName,formattedAddress,shortFormattedAddress,addressComponents,location,types,rating,photos"
COORDINATE_FIELD_MASK = "location"

_PLACEHOLDER_KEYS = frozenset({"", "YOUR_GOOGLE_PLACES_API_KEY_HERE"})
_PROVIDER = "google_places"


class GooglePlacesClient(BasePlacesProvider):
    """Google Places (New) provider."""

    def __init__(self, api_key: str | None, timeout: float = DEFAULT_TIMEOUT) -> None:
        self._api_key = api_key or ""
        self._timeout = timeout

    @property
    def provider_name(self) -> str:
        return _PROVIDER

    @property
    def is_configured(self) -> bool:
        return self._api_key not in _PLACEHOLDER_KEYS

    def _headers(self, field_mask: str | None = None) -> dict[str, str]:
        if not self.is_configured:
            msg = "Google Places API key is not configured (set GOOGLE_PLACES_API_KEY)"
            raise ConfigurationError(msg)
        headers = {"X-Goog-Api-Key": self._api_key, "Content-Type": "application/json"}
        if field_mask:
            headers["X-Goog-FieldMask"] = field_mask
        return headers

    async def _request(
        self,
        method: str,
        url: str,
        *,
        headers: dict[str, str] | None = None,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        allow_not_found: bool = False,
        follow_redirects: bool = False,
    ) -> httpx.Response:
        """Send a request and translate failures into the error taxonomy.

        Returns:
            The response. A 404 is returned as-is when ``allow_not_found`` is set.

        Raises:
            ConfigurationError: On 401/403 (key rejected).
            NetworkError: On timeout, connection failure, or other non-2xx status.
        """
        try:
            async with httpx.AsyncClient(timeout=self._timeout, follow_redirects=follow_redirects) as client:
                if method == "POST":
                    response = await client.post(url, headers=headers, json=json)
                else:
                    response = await client.get(url, headers=headers, params=params)

            if allow_not_found and response.status_code == 404:
                return response
            if response.status_code in (401, 403):
                logger.error(f"Google Places rejected the API key (HTTP {response.status_code})")
                msg = "Invalid Google Places API key. Check the key and its API restrictions."
                raise ConfigurationError(msg)
            response.raise_for_status()
            return response

        except httpx.TimeoutException as e:
            logger.warning("Google Places request timed out")
            raise NetworkError(_PROVIDER, "Request timed out") from e
        except httpx.HTTPStatusError as e:
            logger.warning(f"Google Places HTTP error {e.response.status_code}")
            raise NetworkError(
                _PROVIDER,
                f"Provider returned HTTP {e.response.status_code}",
                status_code=e.response.status_code,
            ) from e
        except httpx.ConnectError as e:
            logger.warning("Google Places connection error")
            raise NetworkError(_PROVIDER, "Connection to places provider failed") from e
        except httpx.HTTPError as e:
            logger.warning(f"Google Places transport error: {e}")
            raise NetworkError(_PROVIDER, f"Transport error: {e}") from e

    @staticmethod
    def _decode(response: httpx.Response) -> dict[str, Any]:
        try:
            data = response.json()
        except ValueError as e:
            raise NetworkError(_PROVIDER, f"Failed to decode response: {e}") from e
        if not isinstance(data, dict):
            raise NetworkError(_PROVIDER, "Unexpected response shape")
        return data

    async def autocomplete(
        self,
        query: str,
        origin: Coordinate | None = None,
        radius_meters: float | None = None,
    ) -> list[PlaceCandidate]:
        """Run a text autocomplete request.

        Args:
            query: Text typed by the user.
            origin: Optional center of the location bias circle.
            radius_meters: Bias circle radius.

        Returns:
            Candidates in upstream order.

        Raises:
            ConfigurationError: If the API key is missing or rejected.
            NetworkError: On transport, status, or decode errors.
        """
        if not query.strip():
            return []
        headers = self._headers()
        body: dict[str, Any] = {"input": query, "includedPrimaryTypes": ["establishment"]}
        if origin is not None and radius_meters:
            body["locationBias"] = {
                "circle": {
                    "center": {"latitude": origin.latitude, "longitude": origin.longitude},
                    "radius": radius_meters,
                }
            }

        response = await self._request("POST", AUTOCOMPLETE_URL, headers=headers, json=body)
        return self._parse_autocomplete(self._decode(response))

    def _parse_autocomplete(self, data: dict[str, Any]) -> list[PlaceCandidate]:
        """Parse an autocomplete response into candidates.

        Suggestions without a place prediction (query predictions) are skipped.
        Without ``structuredFormat`` the full text is split on the first ", ".

        Args:
            data: Raw JSON response.

        Returns:
            List of PlaceCandidate.

        Raises:
            NetworkError: If a place prediction is malformed.
        """
        candidates: list[PlaceCandidate] = []
        for suggestion in data.get("suggestions", []) or []:
            prediction = suggestion.get("placePrediction")
            if not prediction:
                continue
            try:
                place_id = prediction["placeId"]
                full_text = prediction.get("text", {}).get("text", "")
                structured = prediction.get("structuredFormat")
                if structured:
                    name = structured["mainText"]["text"]
                    address = (structured.get("secondaryText") or {}).get("text", "")
                else:
                    name, _, address = full_text.partition(", ")
                candidates.append(PlaceCandidate(place_id=place_id, name=name or full_text, address=address))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"Failed to parse autocomplete suggestion: {e}")
                raise NetworkError(_PROVIDER, f"Failed to parse response: {e}") from e
        return candidates

    async def search_nearby(
        self,
        origin: Coordinate,
        radius_meters: float,
        max_results: int,
        page_token: str | None = None,
    ) -> NearbyPage:
        """Run a nearby search restricted to a circle.

        Args:
            origin: Circle center.
            radius_meters: Circle radius.
            max_results: Places per page (Google caps this at 20).
            page_token: Continuation token from a previous page.

        Returns:
            A NearbyPage.

        Raises:
            ConfigurationError: If the API key is missing or rejected.
            NetworkError: On transport, status, or decode errors.
        """
        headers = self._headers(NEARBY_FIELD_MASK)
        body: dict[str, Any] = {
            "maxResultCount": max_results,
            "locationRestriction": {
                "circle": {
                    "center": {"latitude": origin.latitude, "longitude": origin.longitude},
                    "radius": radius_meters,
                }
            },
        }
        if page_token:
            body["pageToken"] = page_token

        response = await self._request("POST", NEARBY_SEARCH_URL, headers=headers, json=body)
        data = self._decode(response)
        places = [record for raw in data.get("places", []) or [] if (record := self._parse_place(raw)) is not None]
        return NearbyPage(places=places, next_page_token=data.get("nextPageToken") or None)

    async def fetch_coordinate(self, place_id: str) -> Coordinate | None:
        """Fetch a place's coordinate using the ``location`` field mask.

        Args:
            place_id: Upstream place identifier.

        Returns:
            The coordinate, or None if the place is unknown.

        Raises:
            ConfigurationError: If the API key is missing or rejected.
            NetworkError: On transport, status, or decode errors.
        """
        headers = self._headers(COORDINATE_FIELD_MASK)
        response = await self._request(
            "GET", f"{PLACES_BASE_URL}/places/{place_id}", headers=headers, allow_not_found=True
        )
        if response.status_code == 404:
            return None
        data = self._decode(response)
        location = data.get("location")
        if not location:
            return None
        try:
            return Coordinate(float(location["latitude"]), float(location["longitude"]))
        except (KeyError, TypeError, ValueError) as e:
            raise NetworkError(_PROVIDER, f"Failed to parse location: {e}") from e

    async def fetch_place(self, place_id: str) -> PlaceRecord | None:
        """Fetch full place details.

        Args:
            place_id: Upstream place identifier.

        Returns:
            A PlaceRecord, or None if the place is unknown or has no location.

        Raises:
            ConfigurationError: If the API key is missing or rejected.
            NetworkError: On transport, status, or decode errors.
        """
        headers = self._headers(DETAILS_FIELD_MASK)
        response = await self._request(
            "GET", f"{PLACES_BASE_URL}/places/{place_id}", headers=headers, allow_not_found=True
        )
        if response.status_code == 404:
            return None
        return self._parse_place(self._decode(response))

    def _parse_place(self, raw: dict[str, Any]) -> PlaceRecord | None:
        """Convert a Places API place object into a PlaceRecord.

        Places missing an id or location are skipped (returns None).

        Args:
            raw: A single place object.

        Returns:
            PlaceRecord or None.
        """
        place_id = raw.get("id")
        location = raw.get("location") or {}
        if not place_id or "latitude" not in location or "longitude" not in location:
            logger.debug(f"Skipping place without id or location: {place_id}")
            return None

        components = raw.get("addressComponents") or []
        types = list(raw.get("types") or [])
        photos = raw.get("photos") or []
        try:
            return PlaceRecord(
                place_id=place_id,
                name=(raw.get("displayName") or {}).get("text") or "Unknown",
                latitude=float(location["latitude"]),
                longitude=float(location["longitude"]),
                address=_street_address(components, raw.get("shortFormattedAddress"), raw.get("formattedAddress")),
                city=_component(components, "locality"),
                types=types,
                category=categorize(types),
                rating=raw.get("rating"),
                photo_reference=photos[0].get("name") if photos else None,
            )
        except (TypeError, ValueError) as e:
            logger.warning(f"Failed to parse place {place_id}: {e}")
            return None

    async def fetch_photo(self, photo_reference: str, max_width: int) -> bytes | None:
        """Download a photo from the media endpoint.

        The media endpoint answers with a redirect to the image host, which is
        followed.

        Args:
            photo_reference: Photo resource name (``places/{id}/photos/{ref}``).
            max_width: ``maxWidthPx`` to request.

        Returns:
            Raw image bytes, or None if the photo is gone.

        Raises:
            ConfigurationError: If the API key is missing or rejected.
            NetworkError: On transport or status errors, or an empty body.
        """
        if not self.is_configured:
            msg = "Google Places API key is not configured (set GOOGLE_PLACES_API_KEY)"
            raise ConfigurationError(msg)
        response = await self._request(
            "GET",
            f"{PLACES_BASE_URL}/{photo_reference}/media",
            params={"maxWidthPx": max_width, "key": self._api_key},
            allow_not_found=True,
            follow_redirects=True,
        )
        if response.status_code == 404:
            return None
        if not response.content:
            raise NetworkError(_PROVIDER, "No data received for photo")
        return response.content


def _component(components: list[dict[str, Any]], component_type: str) -> str | None:
    for component in components:
        if component_type in (component.get("types") or []):
            return component.get("longText")
    return None


def _street_address(
    components: list[dict[str, Any]],
    short_address: str | None,
    formatted_address: str | None,
) -> str:
    """Build ``"{street_number} {route}"``, falling back to the formatted addresses."""
    number = _component(components, "street_number")
    route = _component(components, "route")
    if number and route:
        return f"{number} {route}"
    if route:
        return route
    return short_address or formatted_address or ""
