"""Object storage for mirrored spot photos."""

from spots_api.lib.storage.object_store import (
    PHOTO_CONTENT_TYPE,
    build_public_url,
    create_storage_client,
    photo_object_key,
    sanitize_object_key,
    upload_photo,
)

__all__ = [
    "PHOTO_CONTENT_TYPE",
    "build_public_url",
    "create_storage_client",
    "photo_object_key",
    "sanitize_object_key",
    "upload_photo",
]
