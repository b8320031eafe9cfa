"""API tests against the offline mock provider."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from mapcache.adapters.mapbox import mock as mock_mapbox
from mapcache.api.main import create_app
from mapcache.config.settings import Settings
from mapcache.infrastructure.cache import build_caches
from mapcache.shared.exceptions import ToolError

AUCKLAND = [174.7633, -36.8485]
ROTORUA = [176.2497, -38.1368]
WELLINGTON = [174.7762, -41.2865]


class _CountingDirections:
    def __init__(self):
        self.calls = 0

    def get_route(self, params):
        self.calls += 1
        return mock_mapbox.get_route(params)


@pytest.fixture
def directions():
    return _CountingDirections()


@pytest.fixture
def caches():
    return build_caches()


@pytest.fixture
def client(caches, directions):
    app = create_app(
        Settings(geocode_batch_delay_seconds=0.0),
        caches,
        geocoding_tool=mock_mapbox,
        directions_tool=directions,
    )
    return TestClient(app)


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"
    assert r.headers["X-Content-Type-Options"] == "nosniff"


def test_find_place_then_cache_hit(client, caches):
    r = client.get("/places/find", params={"q": "Paris, France"})
    assert r.status_code == 200
    assert r.json()["name"] == "Paris"

    r = client.get("/places/find", params={"q": "PARIS, FRANCE"})
    assert r.status_code == 200
    assert r.json() == {"name": "PARIS, FRANCE", "location": [2.3522, 48.8566], "address": None, "types": []}
    assert caches.geocoding.stats["hits"] == 1


def test_find_place_not_found(client):
    r = client.get("/places/find", params={"q": "Atlantis"})
    assert r.status_code == 404


def test_find_place_blank_query_is_unprocessable(client):
    r = client.get("/places/find", params={"q": "   "})
    assert r.status_code == 422


def test_suggest(client):
    r = client.get("/places/suggest", params={"q": "Otago"})
    assert r.status_code == 200
    assert r.json()["suggestions"] == ["Otago, New Zealand"]


def test_batch_geocode(client):
    r = client.post("/places/batch", json={"destinations": ["Auckland", "Atlantis", "Napier"]})
    data = r.json()
    assert r.status_code == 200
    assert list(data["locations"]) == ["Auckland", "Napier"]
    assert data["unresolved"] == ["Atlantis"]


def test_route_geometry_is_cached_symmetrically(client, directions):
    r1 = client.post("/routes/geometry", json={"start": AUCKLAND, "end": WELLINGTON})
    r2 = client.post("/routes/geometry", json={"start": WELLINGTON, "end": AUCKLAND})

    assert r1.status_code == 200
    assert r2.status_code == 200
    assert r1.json()["geometry"] == r2.json()["geometry"]
    assert directions.calls == 1


def test_route_geometry_rejects_bad_coordinates(client):
    r = client.post("/routes/geometry", json={"start": [174.7633], "end": WELLINGTON})
    assert r.status_code == 422


def test_route_geometry_accepts_out_of_range_coordinates(client, directions):
    r = client.post("/routes/geometry", json={"start": [1e30, 0.0], "end": [0.0, 0.0]})
    assert r.status_code == 200
    assert directions.calls == 1


def test_itinerary_routes(client, directions):
    r = client.post("/routes/itinerary", json={"stops": [AUCKLAND, ROTORUA, WELLINGTON]})
    segments = r.json()["segments"]
    assert r.status_code == 200
    assert [s["index"] for s in segments] == [0, 1]
    assert directions.calls == 2


def test_directions(client):
    r = client.get("/directions", params={"origin": "Auckland", "destination": "Rotorua"})
    data = r.json()
    assert r.status_code == 200
    assert data["mode"] == "driving"
    assert data["distance"].endswith("km")


def test_directions_unknown_place_is_bad_gateway(client):
    r = client.get("/directions", params={"origin": "Atlantis", "destination": "Rotorua"})
    assert r.status_code == 502
    assert r.json()["tool"] == "directions"


def test_directions_provider_error_is_scrubbed(caches, monkeypatch):
    class _Failing:
        def get_route(self, params):
            raise ToolError("mapbox_directions", "HTTP 401 for url ?access_token=abc123secret")

    app = create_app(Settings(), caches, geocoding_tool=mock_mapbox, directions_tool=_Failing())
    r = TestClient(app).get("/directions", params={"origin": "Auckland", "destination": "Rotorua"})
    assert r.status_code == 502
    assert "abc123secret" not in r.text


def test_cache_admin_endpoints(client, caches):
    client.get("/places/find", params={"q": "Paris"})
    client.get("/places/find", params={"q": "London"})
    client.post("/routes/geometry", json={"start": AUCKLAND, "end": ROTORUA})

    r = client.delete("/cache/geocoding/PARIS")
    assert r.json() == {"cache": "geocoding", "status": "deleted", "size": 1}
    assert caches.geocoding.get("London") is not None

    r = client.delete("/cache/geocoding/Tokyo")
    assert r.status_code == 200
    assert r.json()["size"] == 1

    assert client.delete("/cache/geocoding").json()["size"] == 0
    assert client.delete("/cache/routes").json() == {"cache": "route", "status": "cleared", "size": 0}
    assert caches.route.get(AUCKLAND, ROTORUA) is None


def test_diagnostics_reports_cache_stats(client):
    client.post("/routes/geometry", json={"start": AUCKLAND, "end": ROTORUA})
    data = client.get("/diagnostics").json()

    assert data["tools"]["geocoding"] == "mock"
    assert data["cache"]["route"]["size"] == 2
    assert data["cache"]["geocoding"]["size"] == 0
