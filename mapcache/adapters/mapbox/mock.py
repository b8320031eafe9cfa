"""Offline Mapbox stand-in: a small gazetteer and straight-line routes."""

from __future__ import annotations

import math

from mapcache.shared.exceptions import ToolError
from mapcache.tools.interfaces import (
    GeocodeInput,
    PlaceResult,
    RouteGeometry,
    RouteInput,
    RouteResult,
)

# name -> (lng, lat, country, place_type, place_name)
_GAZETTEER: dict[str, tuple[float, float, str, str, str]] = {
    "Auckland": (174.7633, -36.8485, "nz", "place", "Auckland, New Zealand"),
    "Wellington": (174.7762, -41.2865, "nz", "place", "Wellington, New Zealand"),
    "Christchurch": (172.6362, -43.5321, "nz", "place", "Christchurch, Canterbury, New Zealand"),
    "Queenstown": (168.6626, -45.0312, "nz", "place", "Queenstown, Otago, New Zealand"),
    "Rotorua": (176.2497, -38.1368, "nz", "place", "Rotorua, Bay of Plenty, New Zealand"),
    "Napier": (176.9120, -39.4928, "nz", "place", "Napier, Hawke's Bay, New Zealand"),
    "Dunedin": (170.5028, -45.8788, "nz", "place", "Dunedin, Otago, New Zealand"),
    "Nelson": (173.2840, -41.2706, "nz", "place", "Nelson, New Zealand"),
    "Otago": (169.8500, -45.4800, "nz", "region", "Otago, New Zealand"),
    "New Zealand": (172.8344, -41.5001, "nz", "country", "New Zealand"),
    "Paris": (2.3522, 48.8566, "fr", "place", "Paris, France"),
    "London": (-0.1276, 51.5072, "gb", "place", "London, Greater London, United Kingdom"),
    "Tokyo": (139.6503, 35.6762, "jp", "place", "Tokyo, Japan"),
    "Sydney": (151.2093, -33.8688, "au", "place", "Sydney, New South Wales, Australia"),
}

# km/h per routing profile
SPEED_MAP = {
    "mapbox/driving": 60.0,
    "mapbox/driving-traffic": 45.0,
    "mapbox/cycling": 15.0,
    "mapbox/walking": 5.0,
}

_ROUTE_POINTS = 8


def haversine(lng1: float, lat1: float, lng2: float, lat2: float) -> float:
    radius_km = 6371.0
    dlat = math.radians(lat2 - lat1)
    dlng = math.radians(lng2 - lng1)
    a = (
        math.sin(dlat / 2) ** 2
        + math.cos(math.radians(lat1))
        * math.cos(math.radians(lat2))
        * math.sin(dlng / 2) ** 2
    )
    return radius_km * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def _matches(name: str, place_name: str, needle: str) -> bool:
    head = needle.split(",")[0].strip()
    if not head:
        return False
    return name.lower().startswith(head) or place_name.lower().startswith(needle)


def forward_geocode(params: GeocodeInput) -> list[PlaceResult]:
    needle = params.query.strip().lower()
    results: list[PlaceResult] = []
    for name, (lng, lat, country, place_type, place_name) in _GAZETTEER.items():
        if params.country and country != params.country.lower():
            continue
        if params.types and place_type not in params.types:
            continue
        if not _matches(name, place_name, needle):
            continue
        results.append(
            PlaceResult(name=name, location=(lng, lat), address=place_name, types=[place_type])
        )
        if len(results) >= params.limit:
            break
    return results


def get_route(params: RouteInput) -> RouteResult:
    speed = SPEED_MAP.get(params.profile)
    if speed is None:
        raise ToolError("mock_directions", f"Unknown routing profile: {params.profile}")

    (lng1, lat1), (lng2, lat2) = params.start, params.end
    coords = [
        (
            round(lng1 + (lng2 - lng1) * i / (_ROUTE_POINTS - 1), 6),
            round(lat1 + (lat2 - lat1) * i / (_ROUTE_POINTS - 1), 6),
        )
        for i in range(_ROUTE_POINTS)
    ]
    distance_km = haversine(lng1, lat1, lng2, lat2) * 1.4
    return RouteResult(
        geometry=RouteGeometry(coordinates=coords),
        distance_m=round(distance_km * 1000, 1),
        duration_s=round(distance_km / speed * 3600, 1),
    )
