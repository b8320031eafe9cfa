"""Cache key types and coordinate normalization."""

from mapcache.domain.keys import (
    COORD_PRECISION,
    Coordinate,
    RouteKey,
    derive_geocoding_key,
    derive_route_key,
    normalize_coordinate,
    to_fixed,
)

__all__ = [
    "COORD_PRECISION",
    "Coordinate",
    "RouteKey",
    "derive_geocoding_key",
    "derive_route_key",
    "normalize_coordinate",
    "to_fixed",
]
