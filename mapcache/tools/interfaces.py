"""Tool abstraction protocols and I/O schemas."""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

from pydantic import BaseModel, Field, field_validator

from mapcache.domain.keys import Coordinate, normalize_coordinate
from mapcache.shared.exceptions import ToolError


class GeocodeInput(BaseModel):
    query: str = Field(min_length=1)
    country: Optional[str] = Field(default=None, description="ISO 3166 alpha-2 filter")
    types: list[str] = Field(default_factory=list, description="Mapbox place types, e.g. place, region")
    limit: int = Field(default=5, ge=1, le=10)


class PlaceResult(BaseModel):
    name: str
    location: Coordinate = Field(description="(lng, lat)")
    address: Optional[str] = None
    types: list[str] = Field(default_factory=list)


class RouteInput(BaseModel):
    start: Coordinate
    end: Coordinate
    profile: str = "mapbox/driving"

    @field_validator("start", "end", mode="before")
    @classmethod
    def _check_point(cls, value):
        return normalize_coordinate(value)


class RouteGeometry(BaseModel):
    """GeoJSON geometry as returned by the directions API."""

    type: str = "LineString"
    coordinates: list[Coordinate] = Field(default_factory=list)


class RouteResult(BaseModel):
    geometry: RouteGeometry
    distance_m: float
    duration_s: float


@runtime_checkable
class GeocodingTool(Protocol):
    def forward_geocode(self, params: GeocodeInput) -> list[PlaceResult]: ...


@runtime_checkable
class DirectionsTool(Protocol):
    def get_route(self, params: RouteInput) -> RouteResult: ...


__all__ = [
    "GeocodeInput",
    "PlaceResult",
    "RouteInput",
    "RouteGeometry",
    "RouteResult",
    "GeocodingTool",
    "DirectionsTool",
    "ToolError",
]
