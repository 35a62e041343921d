"""Photo service — mirror upstream cover photos into object storage.

``ensure_photo`` is best-effort: it never raises, and a spot without a
durable URL is a valid state. Each call opens its own short-lived sessions
so it can run detached from the request that triggered it.
"""

import asyncio
from collections.abc import Sequence
from typing import Any

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from spots_api.core.database import session_scope
from spots_api.lib.cache import PhotoCache
from spots_api.lib.errors import ConfigurationError
from spots_api.lib.photos import DecodedPhoto, decode_photo
from spots_api.lib.places.base import BasePlacesProvider
from spots_api.lib.storage import build_public_url, photo_object_key, upload_photo
from spots_api.services.spot_service import get_spot_photo_url, set_spot_photo

DEFAULT_BATCH_SIZE = 3
DEFAULT_MAX_WIDTH = 400


class PhotoService:
    """Download, cache, mirror, and record spot cover photos.

    Args:
        provider: Places provider used to download photo bytes.
        photo_cache: LRU cache of decoded photos keyed by photo reference.
        session_factory: Factory for the sessions this service opens.
        storage_client: boto3 S3 client, or None when storage is not configured.
        bucket: Bucket holding mirrored photos.
        public_url: Public URL prefix for the bucket.
        endpoint_url: Storage endpoint, used for URLs when no public prefix is set.
        max_width: ``maxWidthPx`` requested from the photo host.
        batch_size: Photos mirrored concurrently per batch.
    """

    def __init__(
        self,
        provider: BasePlacesProvider,
        photo_cache: PhotoCache,
        session_factory: async_sessionmaker[AsyncSession],
        storage_client: Any | None,
        bucket: str,
        public_url: str | None = None,
        endpoint_url: str | None = None,
        max_width: int = DEFAULT_MAX_WIDTH,
        batch_size: int = DEFAULT_BATCH_SIZE,
    ) -> None:
        self._provider = provider
        self._cache = photo_cache
        self._session_factory = session_factory
        self._storage = storage_client
        self._bucket = bucket
        self._public_url = public_url
        self._endpoint_url = endpoint_url
        self._max_width = max_width
        self._batch_size = batch_size

    async def ensure_photo(self, place_id: str, photo_reference: str) -> str | None:
        """Return a durable URL for the spot's photo, mirroring it if needed.

        Safe to call repeatedly: once the spot has a URL, no network or
        storage call is made.

        Args:
            place_id: Spot whose photo to mirror.
            photo_reference: Upstream photo resource name.

        Returns:
            The durable URL, or None if any step failed.
        """
        try:
            async with session_scope(self._session_factory) as session:
                existing = await get_spot_photo_url(session, place_id)
            if existing:
                return existing

            if self._storage is None:
                msg = "Object storage is not configured (set STORAGE_ENDPOINT_URL and credentials)"
                raise ConfigurationError(msg)

            photo = await self._load_photo(photo_reference)
            if photo is None:
                logger.info(f"No photo found upstream for {place_id} ({photo_reference})")
                return None

            key = photo_object_key(place_id)
            url = build_public_url(self._bucket, key, self._public_url, self._endpoint_url)
            await asyncio.to_thread(upload_photo, self._storage, self._bucket, key, photo.data)

            async with session_scope(self._session_factory) as session:
                updated = await set_spot_photo(session, place_id, url, photo_reference)
                await session.commit()
            if not updated:
                logger.warning(f"Mirrored photo for {place_id} but no spot row exists to record it")
            else:
                logger.info(f"Mirrored photo for {place_id} to {key}")
            return url

        except Exception as e:
            logger.warning(f"Photo mirroring failed for {place_id}: {e}")
            return None

    async def _load_photo(self, photo_reference: str) -> DecodedPhoto | None:
        cached = self._cache.get(photo_reference)
        if cached is not None:
            logger.debug(f"Photo cache hit for {photo_reference}")
            return cached

        data = await self._provider.fetch_photo(photo_reference, self._max_width)
        if data is None:
            return None
        photo = decode_photo(data, self._provider.provider_name)
        self._cache.put(photo_reference, photo)
        return photo

    async def ensure_photos(self, items: Sequence[tuple[str, str]]) -> dict[str, str]:
        """Mirror photos for many spots with bounded concurrency.

        Items are processed in batches of ``batch_size``; the photos of one
        batch run concurrently and each batch finishes before the next starts.

        Args:
            items: (place_id, photo_reference) pairs.

        Returns:
            Mapping of place_id to durable URL for every spot that succeeded.
        """
        urls: dict[str, str] = {}
        for start in range(0, len(items), self._batch_size):
            batch = items[start : start + self._batch_size]
            results = await asyncio.gather(
                *(self.ensure_photo(place_id, photo_reference) for place_id, photo_reference in batch)
            )
            for (place_id, _), url in zip(batch, results, strict=True):
                if url:
                    urls[place_id] = url
        logger.bind(json_output=True, requested=len(items), mirrored=len(urls)).info("Photo batch finished")
        return urls
