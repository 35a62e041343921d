"""Application configuration via Pydantic Settings.

All configuration is loaded from environment variables following 12-factor principles.
"""

import re

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database
    database_url: str = Field(
        description="PostgreSQL async connection string",
    )
    database_schema: str | None = Field(
        default=None,
        description="PostgreSQL schema for isolated environments (e.g., pr_42)",
    )

    @field_validator("database_schema")
    @classmethod
    def validate_database_schema(cls, v: str | None) -> str | None:
        if v is None:
            return None
        if not re.match(r"^[a-z_][a-z0-9_]{0,62}$", v):
            msg = "Invalid database_schema: must match ^[a-z_][a-z0-9_]{0,62}$"
            raise ValueError(msg)
        return v

    # Google Places (New)
    google_places_api_key: str | None = Field(
        default=None,
        description="Google Places API key (autocomplete, nearby, details, photo media)",
    )
    google_places_timeout: float = Field(
        default=10.0,
        description="Google Places request timeout in seconds",
        gt=0,
    )

    # Search
    places_search_radius_meters: float = Field(
        default=10000.0,
        description="Location bias radius for autocomplete requests",
        gt=0,
        le=50000,
    )
    places_search_result_limit: int = Field(
        default=10,
        description="Maximum candidates returned by a search",
        gt=0,
    )
    places_nearby_radius_meters: float = Field(
        default=1000.0,
        description="Default radius for nearby searches",
        gt=0,
        le=50000,
    )
    places_nearby_page_size: int = Field(
        default=10,
        description="Default maxResultCount for nearby searches (max 20)",
        gt=0,
        le=20,
    )
    places_photo_max_width: int = Field(
        default=400,
        description="maxWidthPx requested from the photo media endpoint",
        gt=0,
        le=4800,
    )

    # In-memory caches
    search_cache_ttl_seconds: float = Field(
        default=180.0,
        description="Search response cache TTL in seconds",
        gt=0,
    )
    search_cache_max_entries: int = Field(
        default=256,
        description="Maximum cached search responses",
        gt=0,
    )
    coordinate_cache_max_entries: int = Field(
        default=5000,
        description="Maximum cached place coordinates",
        gt=0,
    )
    photo_cache_max_entries: int = Field(
        default=100,
        description="Maximum photos held in the in-memory photo cache",
        gt=0,
    )
    photo_cache_max_bytes: int = Field(
        default=50 * 1024 * 1024,
        description="Maximum total bytes held in the in-memory photo cache",
        gt=0,
    )
    photo_batch_size: int = Field(
        default=3,
        description="Photos mirrored concurrently per batch",
        gt=0,
    )

    # S3-compatible object storage (Supabase Storage, R2, MinIO)
    storage_endpoint_url: str | None = Field(
        default=None,
        description="S3-compatible endpoint URL for the photo bucket",
    )
    storage_access_key_id: str | None = Field(
        default=None,
        description="Object storage access key",
    )
    storage_secret_access_key: str | None = Field(
        default=None,
        description="Object storage secret key",
    )
    storage_region: str = Field(
        default="auto",
        description="Object storage region name",
    )
    storage_bucket: str = Field(
        default="spot-images",
        description="Bucket holding mirrored spot photos",
    )
    storage_public_url: str | None = Field(
        default=None,
        description="Public URL prefix for objects in the bucket (e.g. .../storage/v1/object/public/spot-images)",
    )

    @property
    def storage_configured(self) -> bool:
        """Whether all credentials needed for photo mirroring are present."""
        return bool(self.storage_endpoint_url and self.storage_access_key_id and self.storage_secret_access_key)

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    log_dir: str | None = Field(
        default=None,
        description="Directory for log files (enables file logging with 24h rotation when set)",
    )

    # Environment
    environment: str = Field(
        default="production",
        description="Deployment environment name (e.g. production, dev, staging)",
    )

    # API
    api_v1_prefix: str = Field(
        default="/api/v1",
        description="API version prefix",
    )
    background_drain_timeout: float = Field(
        default=30.0,
        description="Seconds to wait for in-flight photo uploads on shutdown",
        ge=0,
    )


def get_settings() -> Settings:
    """Create and return application settings."""
    return Settings()  # type: ignore[call-arg]
