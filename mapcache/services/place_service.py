"""Place lookups backed by the geocoding cache.

Only the resolved ``(lng, lat)`` is cached per query, so a cache hit comes
back as a ``PlaceResult`` named after the query itself.
"""

from __future__ import annotations

import concurrent.futures
import time
from typing import Iterable, Optional

from mapcache.adapters.tool_factory import get_geocoding_tool
from mapcache.config.settings import Settings
from mapcache.domain.keys import Coordinate, derive_geocoding_key
from mapcache.infrastructure.cache import GeocodingCache
from mapcache.infrastructure.logging import get_logger
from mapcache.shared.exceptions import InvalidInput, ToolError
from mapcache.tools.interfaces import GeocodeInput, GeocodingTool, PlaceResult

_SUGGESTION_TYPES = ["place", "region", "country"]


class PlaceService:
    def __init__(
        self,
        cache: GeocodingCache[Coordinate],
        *,
        tool: GeocodingTool | None = None,
        settings: Settings | None = None,
    ) -> None:
        self._cache = cache
        self._tool = tool or get_geocoding_tool(settings)
        self._settings = settings or Settings()

    @staticmethod
    def _check_query(query: str) -> None:
        if not isinstance(query, str) or not query.strip():
            raise InvalidInput("place query must be a non-empty string")

    def _lookup(self, query: str, types: list[str]) -> list[PlaceResult]:
        slog = get_logger()
        started = slog.tool_start()
        places = self._tool.forward_geocode(
            GeocodeInput(query=query, country=self._settings.geocoding_country, types=types)
        )
        slog.tool_call("mapbox_geocoding", started=started, query=query, results=len(places))
        return places

    def find_place(self, query: str) -> Optional[PlaceResult]:
        """Resolve ``query`` to its best match, consulting the cache first."""
        self._check_query(query)
        cached = self._cache.get(query)
        get_logger().cache_lookup("geocoding", hit=cached is not None, query=query)
        if cached is not None:
            return PlaceResult(name=query, location=cached)

        try:
            places = self._lookup(query, [])
        except ToolError as exc:
            get_logger().warning("places", f"geocoding failed: {exc}", query=query)
            return None
        if not places:
            return None

        place = places[0]
        self._cache.put(query, place.location)
        return place

    def suggest_places(self, query: str) -> list[str]:
        """Autocomplete labels; never cached."""
        self._check_query(query)
        try:
            places = self._lookup(query, _SUGGESTION_TYPES)
        except ToolError as exc:
            get_logger().warning("places", f"place suggestions failed: {exc}", query=query)
            return []
        return [p.address or p.name for p in places]

    def _geocode_one(self, destination: str) -> Optional[Coordinate]:
        try:
            places = self._lookup(destination, ["place"])
        except ToolError as exc:
            get_logger().warning("places", f"geocoding failed: {exc}", query=destination)
            return None
        if not places:
            return None
        location = places[0].location
        self._cache.put(destination, location)
        return location

    def geocode_destinations(self, destinations: Iterable[str]) -> dict[str, Coordinate]:
        """Resolve many destinations, hitting the provider only for cache misses.

        Misses are geocoded in parallel batches with a pause between batches
        to stay under the provider's rate limit. Destinations that cannot be
        resolved are left out of the result.
        """
        labels: list[str] = []
        # cache key -> first label seen for it; only that label is looked up
        lookups: dict[str, str] = {}
        for dest in destinations:
            self._check_query(dest)
            if dest not in labels:
                labels.append(dest)
            lookups.setdefault(derive_geocoding_key(dest), dest)

        coords: dict[str, Coordinate] = {}
        uncached: list[str] = []
        for key, dest in lookups.items():
            cached = self._cache.get(dest)
            if cached is not None:
                coords[key] = cached
            else:
                uncached.append(dest)

        batch_size = self._settings.geocode_batch_size
        delay = self._settings.geocode_batch_delay_seconds
        if uncached:
            with concurrent.futures.ThreadPoolExecutor(max_workers=batch_size) as pool:
                for i in range(0, len(uncached), batch_size):
                    batch = uncached[i : i + batch_size]
                    for dest, location in zip(batch, pool.map(self._geocode_one, batch)):
                        if location is not None:
                            coords[derive_geocoding_key(dest)] = location
                    if i + batch_size < len(uncached) and delay > 0:
                        time.sleep(delay)

        resolved = {dest: coords.get(derive_geocoding_key(dest)) for dest in labels}
        return {dest: location for dest, location in resolved.items() if location is not None}

    def forget_place(self, query: str) -> None:
        self._cache.delete(query)
