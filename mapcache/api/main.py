"""FastAPI application: place and route lookups over the response caches."""

from __future__ import annotations

import logging
import os
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from mapcache.adapters.tool_factory import describe_active_tools
from mapcache.api.schemas import (
    BatchGeocodeRequest,
    BatchGeocodeResponse,
    CacheClearResponse,
    HealthResponse,
    ItineraryRouteRequest,
    ItineraryRouteResponse,
    RouteRequest,
    RouteResponse,
    SuggestResponse,
)
from mapcache.config.settings import Settings, load_settings
from mapcache.infrastructure.cache import MapCaches, build_caches
from mapcache.security.key_manager import get_key_manager
from mapcache.services.place_service import PlaceService
from mapcache.services.route_service import DirectionsSummary, RouteService
from mapcache.shared.exceptions import InvalidInput, ToolError
from mapcache.tools.interfaces import DirectionsTool, GeocodingTool, PlaceResult

_api_logger = logging.getLogger("map-cache.api")

load_dotenv()


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        response.headers["Cache-Control"] = "no-store"
        return response


def _safe_message(exc: Exception) -> str:
    return get_key_manager().scrub_text(str(exc))


def create_app(
    settings: Optional[Settings] = None,
    caches: Optional[MapCaches] = None,
    *,
    geocoding_tool: Optional[GeocodingTool] = None,
    directions_tool: Optional[DirectionsTool] = None,
) -> FastAPI:
    """Build the app and the single set of caches its services share."""
    settings = settings or load_settings()
    caches = caches or build_caches(settings)
    places = PlaceService(caches.geocoding, tool=geocoding_tool, settings=settings)
    routes = RouteService(caches.route, places=places, tool=directions_tool, settings=settings)

    app = FastAPI(
        title="map-cache",
        version="1.0.0",
        docs_url="/docs" if os.getenv("ENABLE_DOCS", "false").lower() == "true" else None,
        redoc_url=None,
    )
    app.state.settings = settings
    app.state.caches = caches
    app.state.places = places
    app.state.routes = routes

    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=os.getenv("CORS_ORIGINS", "*").split(","),
        allow_credentials=True,
        allow_methods=["GET", "POST", "DELETE"],
        allow_headers=["*"],
    )

    @app.exception_handler(InvalidInput)
    async def _invalid_input(_request: Request, exc: InvalidInput):
        return JSONResponse(status_code=422, content={"detail": str(exc)})

    @app.exception_handler(ToolError)
    async def _tool_error(_request: Request, exc: ToolError):
        safe_msg = _safe_message(exc)
        _api_logger.error("tool error: %s", safe_msg)
        return JSONResponse(status_code=502, content={"detail": safe_msg, "tool": exc.tool})

    @app.get("/health", response_model=HealthResponse)
    def health():
        return HealthResponse(status="ok")

    @app.get("/diagnostics")
    def diagnostics():
        return {
            "tools": describe_active_tools(settings),
            "cache": caches.stats,
            "env_source": settings.env_source,
        }

    @app.get("/places/find", response_model=PlaceResult)
    def find_place(q: str = Query(min_length=1, max_length=256)):
        place = places.find_place(q)
        if place is None:
            raise HTTPException(status_code=404, detail=f"No results found for {q!r}")
        return place

    @app.get("/places/suggest", response_model=SuggestResponse)
    def suggest_places(q: str = Query(min_length=1, max_length=256)):
        return SuggestResponse(query=q, suggestions=places.suggest_places(q))

    @app.post("/places/batch", response_model=BatchGeocodeResponse)
    def geocode_batch(req: BatchGeocodeRequest):
        locations = places.geocode_destinations(req.destinations)
        unresolved = [d for d in dict.fromkeys(req.destinations) if d not in locations]
        return BatchGeocodeResponse(locations=locations, unresolved=unresolved)

    @app.post("/routes/geometry", response_model=RouteResponse)
    def route_geometry(req: RouteRequest):
        geometry = routes.get_route_geometry(req.start, req.end)
        if geometry is None:
            raise HTTPException(status_code=404, detail="No route found")
        return RouteResponse(start=req.start, end=req.end, geometry=geometry)

    @app.post("/routes/itinerary", response_model=ItineraryRouteResponse)
    def itinerary_routes(req: ItineraryRouteRequest):
        return ItineraryRouteResponse(segments=routes.get_itinerary_routes(req.stops))

    @app.get("/directions", response_model=DirectionsSummary)
    def directions(
        origin: str = Query(min_length=1, max_length=256),
        destination: str = Query(min_length=1, max_length=256),
        mode: str = Query(default="driving", pattern="^(driving|transit|walking)$"),
    ):
        return routes.get_directions(origin, destination, mode)

    @app.delete("/cache/routes", response_model=CacheClearResponse)
    def clear_route_cache():
        caches.route.clear()
        return CacheClearResponse(cache="route", size=len(caches.route))

    @app.delete("/cache/geocoding", response_model=CacheClearResponse)
    def clear_geocoding_cache():
        caches.geocoding.clear()
        return CacheClearResponse(cache="geocoding", size=len(caches.geocoding))

    @app.delete("/cache/geocoding/{query}", response_model=CacheClearResponse)
    def delete_geocoding_entry(query: str):
        places.forget_place(query)
        return CacheClearResponse(cache="geocoding", status="deleted", size=len(caches.geocoding))

    return app


app = create_app()
