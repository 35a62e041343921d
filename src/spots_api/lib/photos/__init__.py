"""Photo decoding for the in-memory photo cache."""

from spots_api.lib.photos.image import DecodedPhoto, decode_photo

__all__ = ["DecodedPhoto", "decode_photo"]
