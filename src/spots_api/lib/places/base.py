"""Abstract places provider interface and the records it produces."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field


def _validate_coordinate(latitude: float | None, longitude: float | None) -> None:
    if (latitude is None) != (longitude is None):
        msg = "latitude and longitude must be given together"
        raise ValueError(msg)
    if latitude is None or longitude is None:
        return
    if not (-90 <= latitude <= 90):
        msg = f"latitude must be between -90 and 90, got {latitude}"
        raise ValueError(msg)
    if not (-180 <= longitude <= 180):
        msg = f"longitude must be between -180 and 180, got {longitude}"
        raise ValueError(msg)


@dataclass(frozen=True)
class Coordinate:
    """A WGS84 point."""

    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        _validate_coordinate(self.latitude, self.longitude)


@dataclass
class PlaceCandidate:
    """A search result from the autocomplete endpoint.

    ``place_id``, ``name`` and ``address`` are fixed at creation; the
    coordinate and photo fields are filled in later by enrichment.
    """

    place_id: str
    name: str
    address: str = ""
    latitude: float | None = None
    longitude: float | None = None
    photo_url: str | None = None
    photo_reference: str | None = None

    def __post_init__(self) -> None:
        if not self.place_id:
            msg = "place_id must not be empty"
            raise ValueError(msg)
        _validate_coordinate(self.latitude, self.longitude)

    @property
    def coordinate(self) -> Coordinate | None:
        """The candidate's coordinate, if resolved."""
        if self.latitude is None or self.longitude is None:
            return None
        return Coordinate(self.latitude, self.longitude)

    def with_coordinate(self, coordinate: Coordinate) -> "PlaceCandidate":
        """Return a copy enriched with a resolved coordinate."""
        return PlaceCandidate(
            place_id=self.place_id,
            name=self.name,
            address=self.address,
            latitude=coordinate.latitude,
            longitude=coordinate.longitude,
            photo_url=self.photo_url,
            photo_reference=self.photo_reference,
        )


@dataclass
class PlaceRecord:
    """A full place record from nearby search or place details."""

    place_id: str
    name: str
    latitude: float
    longitude: float
    address: str | None = None
    city: str | None = None
    types: list[str] = field(default_factory=list)
    category: str = "Point of Interest"
    rating: float | None = None
    photo_reference: str | None = None

    def __post_init__(self) -> None:
        if not self.place_id:
            msg = "place_id must not be empty"
            raise ValueError(msg)
        _validate_coordinate(self.latitude, self.longitude)


@dataclass
class NearbyPage:
    """One page of nearby-search results."""

    places: list[PlaceRecord]
    next_page_token: str | None = None


class BasePlacesProvider(ABC):
    """Abstract places provider. All upstream search backends implement this.

    Methods return None (or an empty list) when the upstream reports that
    nothing matched, and raise NetworkError or ConfigurationError otherwise.
    """

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Unique name identifying this provider."""

    @property
    def is_configured(self) -> bool:
        """Whether the provider has the credentials it needs."""
        return True

    @abstractmethod
    async def autocomplete(
        self,
        query: str,
        origin: Coordinate | None = None,
        radius_meters: float | None = None,
    ) -> list[PlaceCandidate]:
        """Resolve free text to ordered place candidates.

        Args:
            query: Text typed by the user.
            origin: Optional center of the location bias circle.
            radius_meters: Bias circle radius; ignored without an origin.

        Returns:
            Candidates in upstream order (may contain duplicates).
        """

    @abstractmethod
    async def search_nearby(
        self,
        origin: Coordinate,
        radius_meters: float,
        max_results: int,
        page_token: str | None = None,
    ) -> NearbyPage:
        """Return places inside a circle around ``origin``.

        Args:
            origin: Center of the location restriction.
            radius_meters: Circle radius.
            max_results: Maximum places in the page.
            page_token: Opaque continuation token from a previous page.

        Returns:
            A NearbyPage.
        """

    @abstractmethod
    async def fetch_coordinate(self, place_id: str) -> Coordinate | None:
        """Look up only the coordinate of a place.

        Args:
            place_id: Upstream place identifier.

        Returns:
            The coordinate, or None if the place does not exist.
        """

    @abstractmethod
    async def fetch_place(self, place_id: str) -> PlaceRecord | None:
        """Look up full details of a place.

        Args:
            place_id: Upstream place identifier.

        Returns:
            A PlaceRecord, or None if the place does not exist.
        """

    @abstractmethod
    async def fetch_photo(self, photo_reference: str, max_width: int) -> bytes | None:
        """Download raw photo bytes.

        Args:
            photo_reference: Upstream photo resource name.
            max_width: Maximum width in pixels.

        Returns:
            Image bytes, or None if the photo does not exist.
        """
