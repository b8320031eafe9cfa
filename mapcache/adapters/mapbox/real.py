"""Real Mapbox adapter.

Environment: MAPBOX_ACCESS_TOKEN (required), MAPBOX_API_BASE_URL and
MAPBOX_HTTP_TIMEOUT_SECONDS (optional).
API docs:
  geocoding:  https://docs.mapbox.com/api/search/geocoding-v5/
  directions: https://docs.mapbox.com/api/navigation/directions/
"""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

from mapcache.config.settings import load_settings
from mapcache.security.http_client import SecureHttpClient
from mapcache.security.key_manager import get_key_manager
from mapcache.tools.interfaces import (
    GeocodeInput,
    PlaceResult,
    RouteGeometry,
    RouteInput,
    RouteResult,
    ToolError,
)

_http: SecureHttpClient | None = None


def _client() -> SecureHttpClient:
    global _http
    if _http is None:
        _http = SecureHttpClient(
            tool_name="mapbox",
            max_retries=1,
            timeout=load_settings().http_timeout_seconds,
        )
    return _http


def _get_token() -> str:
    token = get_key_manager().get_mapbox_token(required=False)
    if not token:
        raise ToolError("mapbox", "MAPBOX_ACCESS_TOKEN is not set")
    return token


def _base_url() -> str:
    return load_settings().mapbox_base_url


def _format_point(point: tuple[float, float]) -> str:
    """Mapbox wants lng,lat (longitude first)."""
    return f"{point[0]},{point[1]}"


def _parse_feature(feature: dict[str, Any]) -> PlaceResult | None:
    center = feature.get("center") or []
    if len(center) != 2:
        return None
    return PlaceResult(
        name=str(feature.get("text") or feature.get("place_name") or ""),
        location=(float(center[0]), float(center[1])),
        address=feature.get("place_name"),
        types=list(feature.get("place_type") or []),
    )


def forward_geocode(params: GeocodeInput) -> list[PlaceResult]:
    url = f"{_base_url()}/geocoding/v5/mapbox.places/{quote(params.query, safe='')}.json"
    request_params: dict[str, str] = {
        "access_token": _get_token(),
        "limit": str(params.limit),
    }
    if params.country:
        request_params["country"] = params.country
    if params.types:
        request_params["types"] = ",".join(params.types)

    data = _client().get(url, params=request_params)

    if "features" not in data:
        message = data.get("message", "missing features")
        raise ToolError("mapbox_geocoding", f"unexpected response: {message}")

    places = []
    for feature in data.get("features") or []:
        place = _parse_feature(feature)
        if place is not None:
            places.append(place)
    return places


def get_route(params: RouteInput) -> RouteResult:
    coords = f"{_format_point(params.start)};{_format_point(params.end)}"
    url = f"{_base_url()}/directions/v5/{params.profile}/{coords}"
    request_params = {
        "geometries": "geojson",
        "overview": "full",
        "access_token": _get_token(),
    }

    data = _client().get(url, params=request_params)

    code = data.get("code")
    if code != "Ok":
        message = data.get("message", "unknown error")
        raise ToolError("mapbox_directions", f"directions API error: {message} (code={code})")

    routes = data.get("routes") or []
    if not routes:
        raise ToolError("mapbox_directions", "directions API returned no routes")

    # first route is Mapbox's recommendation
    route = routes[0]
    geometry = route.get("geometry") or {}
    return RouteResult(
        geometry=RouteGeometry(
            type=str(geometry.get("type") or "LineString"),
            coordinates=[(float(c[0]), float(c[1])) for c in geometry.get("coordinates") or []],
        ),
        distance_m=float(route.get("distance", 0)),
        duration_s=float(route.get("duration", 0)),
    )
