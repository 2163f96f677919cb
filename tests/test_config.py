"""Tests for environment-driven configuration."""

from __future__ import annotations

from stationaccess.core.config import ApiConfig, CacheConfig, Settings, SubmissionConfig


class TestDefaults:
    def test_api(self):
        config = ApiConfig()
        assert config.base_url == "http://localhost:8000"
        assert config.max_retries == 1

    def test_cache_stale_times(self):
        config = CacheConfig()
        assert config.list_stale_ms == 5000
        assert config.stats_stale_ms == 60000
        assert config.record_stale_ms == 0

    def test_photo_limit(self):
        assert SubmissionConfig().max_photo_bytes == 10485760


class TestEnvironment:
    def test_nested_sections_read_their_prefix(self, monkeypatch):
        monkeypatch.setenv("STATIONACCESS_API_BASE_URL", "https://reports.example.org")
        monkeypatch.setenv("STATIONACCESS_CACHE_LIST_STALE_MS", "1000")
        monkeypatch.setenv("STATIONACCESS_LOG_LEVEL", "DEBUG")
        settings = Settings()
        assert settings.api.base_url == "https://reports.example.org"
        assert settings.cache.list_stale_ms == 1000
        assert settings.log_level == "DEBUG"

    def test_geolocation_provider(self, monkeypatch):
        monkeypatch.setenv("STATIONACCESS_GEOLOCATION_PROVIDER", "static")
        monkeypatch.setenv("STATIONACCESS_GEOLOCATION_LATITUDE", "53.5")
        monkeypatch.setenv("STATIONACCESS_GEOLOCATION_LONGITUDE", "-113.5")
        settings = Settings()
        assert settings.geolocation.provider == "static"
        assert settings.geolocation.latitude == 53.5
