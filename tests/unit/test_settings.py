"""Environment-driven settings."""

from __future__ import annotations

from mapcache.config.settings import Settings, load_settings


def test_defaults_are_unbounded_and_never_expire():
    settings = load_settings()

    assert settings == Settings()
    assert settings.mapbox_base_url == "https://api.mapbox.com"
    assert settings.route_profile == "mapbox/driving"
    assert settings.route_cache_ttl_seconds is None
    assert settings.route_cache_max_entries is None
    assert settings.geocoding_cache_ttl_seconds is None
    assert settings.geocoding_cache_max_entries is None
    assert settings.geocode_batch_size == 5
    assert settings.geocode_batch_delay_seconds == 0.2


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("MAPBOX_API_BASE_URL", "http://mapbox.local/")
    monkeypatch.setenv("MAPBOX_ROUTE_PROFILE", "mapbox/cycling")
    monkeypatch.setenv("MAPBOX_GEOCODING_COUNTRY", "NZ")
    monkeypatch.setenv("MAPS_PROVIDER", "Mock")
    monkeypatch.setenv("STRICT_EXTERNAL_DATA", "yes")
    monkeypatch.setenv("ROUTE_CACHE_TTL_SECONDS", "604800")
    monkeypatch.setenv("ROUTE_CACHE_MAX_ENTRIES", "500")
    monkeypatch.setenv("GEOCODING_CACHE_MAX_ENTRIES", "200")
    monkeypatch.setenv("GEOCODE_BATCH_SIZE", "3")
    monkeypatch.setenv("GEOCODE_BATCH_DELAY_SECONDS", "0")

    settings = load_settings()

    assert settings.mapbox_base_url == "http://mapbox.local"
    assert settings.route_profile == "mapbox/cycling"
    assert settings.geocoding_country == "nz"
    assert settings.maps_provider == "mock"
    assert settings.strict_external_data is True
    assert settings.route_cache_ttl_seconds == 604800.0
    assert settings.route_cache_max_entries == 500
    assert settings.geocoding_cache_max_entries == 200
    assert settings.geocode_batch_size == 3
    assert settings.geocode_batch_delay_seconds == 0.0


def test_malformed_values_fall_back_to_defaults(monkeypatch):
    monkeypatch.setenv("ROUTE_CACHE_TTL_SECONDS", "a week")
    monkeypatch.setenv("ROUTE_CACHE_MAX_ENTRIES", "1")
    monkeypatch.setenv("GEOCODING_CACHE_TTL_SECONDS", "-5")
    monkeypatch.setenv("GEOCODE_BATCH_SIZE", "0")
    monkeypatch.setenv("MAPS_PROVIDER", "satellite")

    settings = load_settings()

    assert settings.route_cache_ttl_seconds is None
    assert settings.route_cache_max_entries is None
    assert settings.geocoding_cache_ttl_seconds is None
    assert settings.geocode_batch_size == 5
    assert settings.maps_provider == "auto"
