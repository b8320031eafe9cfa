"""Cache-aside services over the mapping tools."""

from mapcache.services.place_service import PlaceService
from mapcache.services.route_service import (
    DirectionsSummary,
    RouteSegment,
    RouteService,
    format_distance,
    format_duration,
)

__all__ = [
    "PlaceService",
    "RouteService",
    "RouteSegment",
    "DirectionsSummary",
    "format_distance",
    "format_duration",
]
