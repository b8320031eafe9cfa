"""API request/response models."""

from __future__ import annotations

from pydantic import BaseModel, Field

from mapcache.domain.keys import Coordinate
from mapcache.services.route_service import RouteSegment
from mapcache.tools.interfaces import RouteGeometry


class HealthResponse(BaseModel):
    status: str = "ok"


class SuggestResponse(BaseModel):
    query: str
    suggestions: list[str] = Field(default_factory=list)


class BatchGeocodeRequest(BaseModel):
    destinations: list[str] = Field(min_length=1, max_length=100, description="Free-text place queries")


class BatchGeocodeResponse(BaseModel):
    locations: dict[str, Coordinate] = Field(default_factory=dict)
    unresolved: list[str] = Field(default_factory=list)


class RouteRequest(BaseModel):
    start: Coordinate = Field(description="(lng, lat)")
    end: Coordinate = Field(description="(lng, lat)")


class RouteResponse(BaseModel):
    start: Coordinate
    end: Coordinate
    geometry: RouteGeometry


class ItineraryRouteRequest(BaseModel):
    stops: list[Coordinate] = Field(max_length=50, description="Ordered (lng, lat) stops")


class ItineraryRouteResponse(BaseModel):
    segments: list[RouteSegment] = Field(default_factory=list)


class CacheClearResponse(BaseModel):
    cache: str
    status: str = "cleared"
    size: int = 0
