"""Deterministic cache keys for route and geocoding lookups.

Route keys are built from ``(lng, lat)`` pairs rounded to four decimal
places the way ``Number.prototype.toFixed(4)`` does it in the browser map
code: exact binary value, ties away from zero. Components are kept as
integers in 1e-4 degree units so two keys compare by value, not by string
formatting.
"""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal, localcontext
from numbers import Real
from typing import NamedTuple, Sequence

from mapcache.shared.exceptions import InvalidInput

COORD_PRECISION = 4

Coordinate = tuple[float, float]

# Enough digits for the integer part of any finite float plus the decimals.
_DECIMAL_PREC = 400


def _half_up(value: float, places: int) -> Decimal:
    # Decimal(float) is exact, so the tie-breaking sees the real binary value.
    with localcontext() as ctx:
        ctx.prec = _DECIMAL_PREC
        return Decimal(value).quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


def to_fixed(value: float, places: int) -> str:
    """Format like JS ``toFixed``: ties round away from zero, no exponent."""
    return format(_half_up(value, places), "f")


def _round_component(value: float) -> int:
    with localcontext() as ctx:
        ctx.prec = _DECIMAL_PREC
        return int(_half_up(value, COORD_PRECISION).scaleb(COORD_PRECISION))


def _format_component(units: int) -> str:
    sign = "-" if units < 0 else ""
    whole, frac = divmod(abs(units), 10**COORD_PRECISION)
    return f"{sign}{whole}.{frac:0{COORD_PRECISION}d}"


def normalize_coordinate(point: Sequence[float]) -> Coordinate:
    """Validate a ``(lng, lat)`` pair and return it as a float tuple.

    Range is not checked: ``(500.0, -120.0)`` passes through unchanged.
    """
    if isinstance(point, (str, bytes)) or not isinstance(point, Sequence):
        raise InvalidInput(f"coordinate must be a (lng, lat) pair, got {type(point).__name__}")
    if len(point) != 2:
        raise InvalidInput(f"coordinate must have exactly 2 components, got {len(point)}")
    lng, lat = point
    for name, value in (("lng", lng), ("lat", lat)):
        if isinstance(value, bool) or not isinstance(value, Real):
            raise InvalidInput(f"{name} must be a real number, got {value!r}")
        if not math.isfinite(value):
            raise InvalidInput(f"{name} must be finite, got {value!r}")
    return float(lng), float(lat)


class RouteKey(NamedTuple):
    start_lng: int
    start_lat: int
    end_lng: int
    end_lat: int

    def reversed(self) -> "RouteKey":
        return RouteKey(self.end_lng, self.end_lat, self.start_lng, self.start_lat)

    def __str__(self) -> str:
        parts = [_format_component(v) for v in self]
        return f"{parts[0]},{parts[1]}-{parts[2]},{parts[3]}"


def derive_route_key(start: Sequence[float], end: Sequence[float]) -> RouteKey:
    start_lng, start_lat = normalize_coordinate(start)
    end_lng, end_lat = normalize_coordinate(end)
    return RouteKey(
        _round_component(start_lng),
        _round_component(start_lat),
        _round_component(end_lng),
        _round_component(end_lat),
    )


def derive_geocoding_key(query: str) -> str:
    """Case-fold a place query. Surrounding whitespace stays part of the key."""
    if not isinstance(query, str):
        raise InvalidInput(f"geocoding query must be a string, got {type(query).__name__}")
    return query.lower()
