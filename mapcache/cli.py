"""map-cache CLI: one-shot geocoding and routing lookups, printed as JSON."""

from __future__ import annotations

import argparse
import json
import sys
from typing import Optional, Sequence

from dotenv import load_dotenv

from mapcache.config.settings import load_settings
from mapcache.infrastructure.cache import build_caches
from mapcache.security.key_manager import get_key_manager
from mapcache.services.place_service import PlaceService
from mapcache.services.route_service import RouteService
from mapcache.shared.exceptions import InvalidInput, ToolError


def _parse_point(raw: str) -> tuple[float, float]:
    parts = raw.split(",")
    if len(parts) != 2:
        raise argparse.ArgumentTypeError(f"expected lng,lat but got {raw!r}")
    try:
        return float(parts[0]), float(parts[1])
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected numbers in {raw!r}") from None


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="map-cache", description="Cached Mapbox lookups")
    sub = parser.add_subparsers(dest="command", required=True)

    geocode = sub.add_parser("geocode", help="resolve one or more place queries")
    geocode.add_argument("queries", nargs="+")

    suggest = sub.add_parser("suggest", help="autocomplete place names")
    suggest.add_argument("query")

    route = sub.add_parser("route", help="route geometry between two lng,lat points")
    route.add_argument("start", type=_parse_point)
    route.add_argument("end", type=_parse_point)

    itinerary = sub.add_parser("itinerary", help="route segments through ordered lng,lat stops")
    itinerary.add_argument("stops", type=_parse_point, nargs="+")

    directions = sub.add_parser("directions", help="readable directions between two places")
    directions.add_argument("origin")
    directions.add_argument("destination")
    directions.add_argument("--mode", choices=["driving", "transit", "walking"], default="driving")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    load_dotenv()
    args = _build_parser().parse_args(argv)

    settings = load_settings()
    caches = build_caches(settings)
    places = PlaceService(caches.geocoding, settings=settings)
    routes = RouteService(caches.route, places=places, settings=settings)

    try:
        if args.command == "geocode":
            if len(args.queries) == 1:
                place = places.find_place(args.queries[0])
                payload = place.model_dump() if place else None
            else:
                payload = places.geocode_destinations(args.queries)
        elif args.command == "suggest":
            payload = places.suggest_places(args.query)
        elif args.command == "route":
            geometry = routes.get_route_geometry(args.start, args.end)
            payload = geometry.model_dump() if geometry else None
        elif args.command == "itinerary":
            payload = [s.model_dump() for s in routes.get_itinerary_routes(args.stops)]
        else:
            payload = routes.get_directions(args.origin, args.destination, args.mode).model_dump()
    except (InvalidInput, ToolError) as exc:
        print(f"error: {get_key_manager().scrub_text(str(exc))}", file=sys.stderr)
        return 1

    print(json.dumps(payload, ensure_ascii=False, indent=2))
    return 0 if payload is not None else 2


if __name__ == "__main__":
    sys.exit(main())
