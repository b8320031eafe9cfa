"""Route geometry lookups backed by the route cache."""

from __future__ import annotations

from typing import Optional, Sequence

from pydantic import BaseModel

from mapcache.adapters.tool_factory import get_directions_tool
from mapcache.config.settings import Settings
from mapcache.domain.keys import Coordinate, normalize_coordinate, to_fixed
from mapcache.infrastructure.cache import RouteCache
from mapcache.infrastructure.logging import get_logger
from mapcache.services.place_service import PlaceService
from mapcache.shared.exceptions import ToolError
from mapcache.tools.interfaces import DirectionsTool, RouteGeometry, RouteInput


_MODE_PROFILES = {
    "driving": "mapbox/driving",
    "walking": "mapbox/walking",
}


class RouteSegment(BaseModel):
    index: int
    start: Coordinate
    end: Coordinate
    geometry: RouteGeometry


class DirectionsSummary(BaseModel):
    origin: str
    destination: str
    mode: str
    duration: str
    distance: str
    duration_s: float
    distance_m: float
    geometry: RouteGeometry


def format_duration(seconds: float) -> str:
    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)
    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"


def format_distance(meters: float) -> str:
    kilometers = meters / 1000
    if kilometers >= 1:
        return f"{to_fixed(kilometers, 1)} km"
    return f"{to_fixed(meters, 0)} m"


class RouteService:
    def __init__(
        self,
        cache: RouteCache[RouteGeometry],
        *,
        places: PlaceService | None = None,
        tool: DirectionsTool | None = None,
        settings: Settings | None = None,
    ) -> None:
        self._cache = cache
        self._places = places
        self._tool = tool or get_directions_tool(settings)
        self._settings = settings or Settings()

    def get_route_geometry(
        self, start: Sequence[float], end: Sequence[float]
    ) -> Optional[RouteGeometry]:
        """Geometry between two ``(lng, lat)`` points, or ``None`` if the provider has none.

        The cache is keyed by coordinates only; every lookup uses the
        configured routing profile.
        """
        slog = get_logger()
        cached = self._cache.get(start, end)
        slog.cache_lookup("route", hit=cached is not None)
        if cached is not None:
            return cached

        started = slog.tool_start()
        try:
            result = self._tool.get_route(
                RouteInput(start=start, end=end, profile=self._settings.route_profile)
            )
        except ToolError as exc:
            slog.warning("routes", f"route lookup failed: {exc}", start=start, end=end)
            return None
        slog.tool_call("mapbox_directions", started=started, points=len(result.geometry.coordinates))

        if not result.geometry.coordinates:
            return None
        self._cache.put(start, end, result.geometry)
        return result.geometry

    def get_itinerary_routes(self, stops: Sequence[Sequence[float]]) -> list[RouteSegment]:
        """One segment per consecutive pair of stops; pairs without a route are skipped."""
        points = [normalize_coordinate(stop) for stop in stops]
        segments: list[RouteSegment] = []
        for i in range(len(points) - 1):
            geometry = self.get_route_geometry(points[i], points[i + 1])
            if geometry is None:
                continue
            segments.append(
                RouteSegment(index=i, start=points[i], end=points[i + 1], geometry=geometry)
            )
        return segments

    def get_directions(self, origin: str, destination: str, mode: str = "driving") -> DirectionsSummary:
        """Geocode both ends and fetch a fresh route with readable totals.

        Raises ``ToolError`` when either place cannot be resolved or the
        directions call fails.
        """
        if self._places is None:
            raise ToolError("directions", "place lookups are not configured")

        origin_place = self._places.find_place(origin)
        if origin_place is None:
            raise ToolError("directions", f"No results found for {origin!r}")
        dest_place = self._places.find_place(destination)
        if dest_place is None:
            raise ToolError("directions", f"No results found for {destination!r}")

        profile = _MODE_PROFILES.get(mode, "mapbox/walking")
        result = self._tool.get_route(
            RouteInput(start=origin_place.location, end=dest_place.location, profile=profile)
        )
        return DirectionsSummary(
            origin=origin,
            destination=destination,
            mode=mode,
            duration=format_duration(result.duration_s),
            distance=format_distance(result.distance_m),
            duration_s=result.duration_s,
            distance_m=result.distance_m,
            geometry=result.geometry,
        )
