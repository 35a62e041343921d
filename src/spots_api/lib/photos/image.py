"""Decode downloaded photo bytes with Pillow.

Decoding proves the upstream payload is a real image before it is cached or
mirrored. The raw bytes are kept unchanged for upload.
"""

import io
from dataclasses import dataclass

from PIL import Image, UnidentifiedImageError

from spots_api.lib.errors import NetworkError


@dataclass(frozen=True)
class DecodedPhoto:
    """Raw photo bytes plus the dimensions Pillow read from them."""

    data: bytes
    width: int
    height: int
    format: str | None

    @property
    def size_bytes(self) -> int:
        """Cost of this photo in the byte-bounded cache."""
        return len(self.data)


def decode_photo(data: bytes, provider_name: str = "google_places") -> DecodedPhoto:
    """Decode image bytes and capture their dimensions.

    Args:
        data: Raw bytes from the photo host.
        provider_name: Upstream name for the error raised on failure.

    Returns:
        A DecodedPhoto wrapping the original bytes.

    Raises:
        NetworkError: If the bytes are empty or not a decodable image.
    """
    if not data:
        raise NetworkError(provider_name, "Photo payload is empty")
    try:
        with Image.open(io.BytesIO(data)) as img:
            img.load()
            return DecodedPhoto(data=data, width=img.width, height=img.height, format=img.format)
    except (UnidentifiedImageError, OSError, ValueError) as e:
        raise NetworkError(provider_name, f"Failed to decode photo: {e}") from e
