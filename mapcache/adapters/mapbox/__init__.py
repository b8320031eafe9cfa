"""Mapbox adapters: ``real`` calls the web API, ``mock`` answers offline."""

from mapcache.adapters.mapbox.mock import forward_geocode as mock_forward_geocode
from mapcache.adapters.mapbox.mock import get_route as mock_get_route
from mapcache.adapters.mapbox.real import forward_geocode as real_forward_geocode
from mapcache.adapters.mapbox.real import get_route as real_get_route

__all__ = [
    "mock_forward_geocode",
    "mock_get_route",
    "real_forward_geocode",
    "real_get_route",
]
