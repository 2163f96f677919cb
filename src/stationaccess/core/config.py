"""Application configuration loaded from environment variables."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings


class ApiConfig(BaseSettings):
    """Reports REST API connection settings."""

    model_config = {"env_prefix": "STATIONACCESS_API_"}

    base_url: str = "http://localhost:8000"
    timeout_seconds: float = 30.0
    max_retries: int = 1


class CacheConfig(BaseSettings):
    """Query cache staleness thresholds, in milliseconds."""

    model_config = {"env_prefix": "STATIONACCESS_CACHE_"}

    list_stale_ms: int = 5_000
    stats_stale_ms: int = 60_000
    record_stale_ms: int = 0


class SubmissionConfig(BaseSettings):
    """Report submission limits."""

    model_config = {"env_prefix": "STATIONACCESS_SUBMISSION_"}

    max_photo_bytes: int = 10 * 1024 * 1024
    geolocation_timeout_seconds: float = 5.0


class GeolocationConfig(BaseSettings):
    """Device location provider configuration."""

    model_config = {"env_prefix": "STATIONACCESS_GEOLOCATION_"}

    provider: str = "none"
    latitude: float | None = None
    longitude: float | None = None
    url: str | None = None


class CatalogConfig(BaseSettings):
    """Station catalog configuration."""

    model_config = {"env_prefix": "STATIONACCESS_CATALOG_"}

    stations_path: str | None = None


class Settings(BaseSettings):
    """Root application settings."""

    model_config = {"env_prefix": "STATIONACCESS_"}

    environment: str = "development"
    debug: bool = False
    log_level: str = "INFO"

    api: ApiConfig = Field(default_factory=ApiConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    submission: SubmissionConfig = Field(default_factory=SubmissionConfig)
    geolocation: GeolocationConfig = Field(default_factory=GeolocationConfig)
    catalog: CatalogConfig = Field(default_factory=CatalogConfig)
