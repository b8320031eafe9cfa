"""Mapbox response cache and cache-aside map services for itinerary views."""

__version__ = "1.0.0"
