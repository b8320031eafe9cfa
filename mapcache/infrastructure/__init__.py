"""Infrastructure services and cross-cutting utilities."""

from mapcache.infrastructure.cache import (
    GeocodingCache,
    MapCaches,
    MemoryCache,
    RouteCache,
    build_caches,
)
from mapcache.infrastructure.logging import StructuredLogger, get_logger

__all__ = [
    "MemoryCache",
    "RouteCache",
    "GeocodingCache",
    "MapCaches",
    "build_caches",
    "StructuredLogger",
    "get_logger",
]
