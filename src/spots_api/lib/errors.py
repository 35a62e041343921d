"""Error taxonomy shared by the places client, photo mirror, and list services.

- ConfigurationError: credentials missing or rejected. Not retried.
- NetworkError: transport failure, timeout, non-2xx status, or a payload that
  could not be decoded. Recoverable by the caller.
- NotFoundError: a required row or upstream object is absent. Provider
  lookups return None for absence instead of raising this.
- ConflictError: a membership row already exists. Callers treat it as success.
"""


class SpotsError(Exception):
    """Base class for all domain errors."""


class ConfigurationError(SpotsError):
    """Raised when an upstream or storage credential is missing or invalid."""


class NetworkError(SpotsError):
    """Raised when an upstream service experiences a transport or service error.

    Args:
        provider_name: Name of the failing upstream (e.g. "google_places", "storage").
        message: Human-readable error description.
        status_code: Optional HTTP status code from the upstream.
    """

    def __init__(self, provider_name: str, message: str, status_code: int | None = None) -> None:
        self.provider_name = provider_name
        self.message = message
        self.status_code = status_code
        super().__init__(f"{provider_name}: {message}")


class NotFoundError(SpotsError):
    """Raised when a required spot or list does not exist."""


class ConflictError(SpotsError):
    """Raised when a spot is already a member of a list."""

    def __init__(self, place_id: str, list_id: object) -> None:
        self.place_id = place_id
        self.list_id = list_id
        super().__init__(f"Spot {place_id} is already in list {list_id}")
