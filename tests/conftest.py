"""pytest global fixtures: keep every test offline and isolated."""

import pytest

_ENV_VARS = (
    "MAPBOX_ACCESS_TOKEN",
    "MAPBOX_API_BASE_URL",
    "MAPBOX_ROUTE_PROFILE",
    "MAPBOX_GEOCODING_COUNTRY",
    "MAPS_PROVIDER",
    "STRICT_EXTERNAL_DATA",
    "TOOL_ALLOWLIST",
    "ROUTE_CACHE_TTL_SECONDS",
    "ROUTE_CACHE_MAX_ENTRIES",
    "GEOCODING_CACHE_TTL_SECONDS",
    "GEOCODING_CACHE_MAX_ENTRIES",
    "GEOCODE_BATCH_SIZE",
    "GEOCODE_BATCH_DELAY_SECONDS",
    "TOOL_HTTP_TIMEOUT_CAP_SECONDS",
    "TOOL_HTTP_TIMEOUT_FLOOR_SECONDS",
    "TOOL_HTTP_RETRY_CAP",
    "MAPBOX_HTTP_TIMEOUT_SECONDS",
    "ENV_SOURCE",
    "ENV_FILE",
    "DOTENV_FILE",
)


@pytest.fixture(autouse=True)
def no_real_apis(monkeypatch):
    """No Mapbox token by default, so every tool resolves to the mock adapter."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    from mapcache.security.key_manager import get_key_manager

    km = get_key_manager()
    km.reload("MAPBOX_ACCESS_TOKEN")
    yield
    km.reload("MAPBOX_ACCESS_TOKEN")


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()
