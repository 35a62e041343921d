"""S3-compatible object storage for mirrored spot photos.

Works against Supabase Storage's S3 endpoint, Cloudflare R2, or any other
S3-compatible service. Objects are written with ``put_object`` so repeated
uploads for the same place overwrite a single key.
"""

import re
from typing import Any

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError
from loguru import logger

from spots_api.lib.errors import ConfigurationError, NetworkError

PHOTO_CONTENT_TYPE = "image/jpeg"
_UNSAFE_KEY_CHARS = re.compile(r"[^a-zA-Z0-9]")
_PROVIDER = "storage"


def create_storage_client(
    endpoint_url: str,
    access_key_id: str,
    secret_access_key: str,
    region_name: str = "auto",
) -> Any:
    """Create a boto3 S3 client for an S3-compatible endpoint.

    Checksums are only sent when required, which R2 and Supabase need with
    boto3 1.36.0 and later.

    Args:
        endpoint_url: Storage endpoint (e.g. ``https://<ref>.supabase.co/storage/v1/s3``).
        access_key_id: Access key.
        secret_access_key: Secret key.
        region_name: Region name expected by the service.

    Returns:
        Configured boto3 S3 client.
    """
    config = Config(
        request_checksum_calculation="when_required",
        response_checksum_validation="when_required",
        s3={"addressing_style": "path"},
    )

    return boto3.client(
        "s3",
        endpoint_url=endpoint_url,
        aws_access_key_id=access_key_id,
        aws_secret_access_key=secret_access_key,
        region_name=region_name,
        config=config,
    )


def sanitize_object_key(place_id: str) -> str:
    """Replace every character outside ``[a-zA-Z0-9]`` with an underscore."""
    return _UNSAFE_KEY_CHARS.sub("_", place_id)


def photo_object_key(place_id: str) -> str:
    """Return the deterministic object key for a place's cover photo."""
    return f"{sanitize_object_key(place_id)}.jpg"


def build_public_url(
    bucket: str,
    key: str,
    public_url: str | None = None,
    endpoint_url: str | None = None,
) -> str:
    """Build the public read URL for an object.

    Args:
        bucket: Bucket name.
        key: Object key.
        public_url: Public prefix for the bucket (custom domain, r2.dev, or
            Supabase ``/storage/v1/object/public/<bucket>``).
        endpoint_url: Endpoint used for a path-style URL when no public
            prefix is configured.

    Returns:
        Absolute URL string.

    Raises:
        ConfigurationError: If neither a public prefix nor an endpoint is set.
    """
    if public_url:
        return f"{public_url.rstrip('/')}/{key}"
    if endpoint_url:
        return f"{endpoint_url.rstrip('/')}/{bucket}/{key}"
    msg = "Object storage public URL is not configured (set STORAGE_PUBLIC_URL)"
    raise ConfigurationError(msg)


def upload_photo(client: Any, bucket: str, key: str, data: bytes) -> int:
    """Upload photo bytes, overwriting any existing object at the key.

    Args:
        client: boto3 S3 client.
        bucket: Bucket name.
        key: Object key.
        data: Raw image bytes.

    Returns:
        Number of bytes uploaded.

    Raises:
        ConfigurationError: If the credentials are rejected.
        NetworkError: On any other storage failure.
    """
    try:
        client.put_object(
            Bucket=bucket,
            Key=key,
            Body=data,
            ContentType=PHOTO_CONTENT_TYPE,
            CacheControl="public, max-age=31536000",
        )
    except ClientError as exc:
        error = exc.response.get("Error", {})
        code = str(error.get("Code", ""))
        status = exc.response.get("ResponseMetadata", {}).get("HTTPStatusCode")
        if code in ("AccessDenied", "InvalidAccessKeyId", "SignatureDoesNotMatch", "401", "403"):
            msg = f"Access denied to bucket '{bucket}'. Verify storage credentials."
            raise ConfigurationError(msg) from exc
        raise NetworkError(_PROVIDER, f"Upload of {key} failed: {code or exc}", status_code=status) from exc
    except BotoCoreError as exc:
        raise NetworkError(_PROVIDER, f"Upload of {key} failed: {exc}") from exc

    logger.debug("Uploaded {} ({} bytes) to s3://{}/{}", key, len(data), bucket, key)
    return len(data)
