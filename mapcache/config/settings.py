"""Runtime settings resolved from the environment."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

_logger = logging.getLogger("map-cache.config")

_TRUTHY = {"1", "true", "yes", "on"}
_PROVIDER_MODES = {"real", "mock", "auto"}

DEFAULT_MAPBOX_BASE_URL = "https://api.mapbox.com"
DEFAULT_ROUTE_PROFILE = "mapbox/driving"
DEFAULT_BATCH_SIZE = 5
DEFAULT_BATCH_DELAY = 0.2
DEFAULT_HTTP_TIMEOUT = 10.0


def _is_enabled(value: str | None) -> bool:
    return bool(value and value.strip().lower() in _TRUTHY)


def _optional_float(name: str, *, allow_zero: bool = False) -> Optional[float]:
    raw = str(os.getenv(name) or "").strip()
    if not raw:
        return None
    try:
        value = float(raw)
    except ValueError:
        _logger.warning("ignoring non-numeric %s=%r", name, raw)
        return None
    if value < 0 or (value == 0 and not allow_zero):
        _logger.warning("ignoring out-of-range %s=%r", name, raw)
        return None
    return value


def _optional_int(name: str, minimum: int = 1) -> Optional[int]:
    raw = str(os.getenv(name) or "").strip()
    if not raw:
        return None
    try:
        value = int(raw)
    except ValueError:
        _logger.warning("ignoring non-integer %s=%r", name, raw)
        return None
    if value < minimum:
        _logger.warning("ignoring %s=%r (minimum %d)", name, raw, minimum)
        return None
    return value


def resolve_maps_provider() -> str:
    mode = str(os.getenv("MAPS_PROVIDER") or "").strip().lower()
    if mode in _PROVIDER_MODES:
        return mode
    return "auto"


def strict_external_data_enabled() -> bool:
    return _is_enabled(os.getenv("STRICT_EXTERNAL_DATA"))


def resolve_env_source() -> str:
    explicit = str(os.getenv("ENV_SOURCE") or "").strip()
    if explicit:
        return explicit
    hint = str(os.getenv("ENV_FILE") or os.getenv("DOTENV_FILE") or "").strip()
    if hint:
        return Path(hint).name or hint
    return ".env"


class Settings(BaseModel):
    mapbox_base_url: str = Field(default=DEFAULT_MAPBOX_BASE_URL)
    route_profile: str = Field(default=DEFAULT_ROUTE_PROFILE)
    geocoding_country: Optional[str] = Field(default=None, description="ISO 3166 alpha-2 filter, e.g. nz")
    maps_provider: str = Field(default="auto")
    strict_external_data: bool = Field(default=False)
    env_source: str = Field(default=".env")

    # None means unbounded / never expires.
    route_cache_ttl_seconds: Optional[float] = Field(default=None, gt=0)
    route_cache_max_entries: Optional[int] = Field(default=None, ge=2)
    geocoding_cache_ttl_seconds: Optional[float] = Field(default=None, gt=0)
    geocoding_cache_max_entries: Optional[int] = Field(default=None, ge=1)

    geocode_batch_size: int = Field(default=DEFAULT_BATCH_SIZE, ge=1)
    geocode_batch_delay_seconds: float = Field(default=DEFAULT_BATCH_DELAY, ge=0)
    http_timeout_seconds: float = Field(default=DEFAULT_HTTP_TIMEOUT, gt=0)


def load_settings() -> Settings:
    """Build ``Settings`` from env vars; malformed values fall back to defaults."""
    batch_delay = _optional_float("GEOCODE_BATCH_DELAY_SECONDS", allow_zero=True)
    return Settings(
        mapbox_base_url=str(os.getenv("MAPBOX_API_BASE_URL") or DEFAULT_MAPBOX_BASE_URL).strip().rstrip("/"),
        route_profile=str(os.getenv("MAPBOX_ROUTE_PROFILE") or DEFAULT_ROUTE_PROFILE).strip(),
        geocoding_country=str(os.getenv("MAPBOX_GEOCODING_COUNTRY") or "").strip().lower() or None,
        maps_provider=resolve_maps_provider(),
        strict_external_data=strict_external_data_enabled(),
        env_source=resolve_env_source(),
        route_cache_ttl_seconds=_optional_float("ROUTE_CACHE_TTL_SECONDS"),
        route_cache_max_entries=_optional_int("ROUTE_CACHE_MAX_ENTRIES", minimum=2),
        geocoding_cache_ttl_seconds=_optional_float("GEOCODING_CACHE_TTL_SECONDS"),
        geocoding_cache_max_entries=_optional_int("GEOCODING_CACHE_MAX_ENTRIES"),
        geocode_batch_size=_optional_int("GEOCODE_BATCH_SIZE") or DEFAULT_BATCH_SIZE,
        geocode_batch_delay_seconds=DEFAULT_BATCH_DELAY if batch_delay is None else batch_delay,
        http_timeout_seconds=_optional_float("MAPBOX_HTTP_TIMEOUT_SECONDS") or DEFAULT_HTTP_TIMEOUT,
    )


__all__ = [
    "Settings",
    "load_settings",
    "resolve_maps_provider",
    "strict_external_data_enabled",
]
