"""Route/geocoding key derivation."""

from __future__ import annotations

import math

import pytest

from mapcache.domain.keys import RouteKey, derive_geocoding_key, derive_route_key
from mapcache.shared.exceptions import InvalidInput


def test_route_key_string_form_uses_four_decimals():
    key = derive_route_key((174.76333, -36.84846), (1, 2))
    assert str(key) == "174.7633,-36.8485-1.0000,2.0000"


def test_route_key_is_structured_and_hashable():
    key = derive_route_key((12.34567, 56.78912), (1.0, 2.0))
    assert isinstance(key, RouteKey)
    assert key == RouteKey(123457, 567891, 10000, 20000)
    assert {key: "x"}[RouteKey(123457, 567891, 10000, 20000)] == "x"


def test_nearby_coordinates_collide_after_rounding():
    a = derive_route_key((12.34567, 56.78912), (0.0, 0.0))
    b = derive_route_key((12.34569, 56.78909), (0.0, 0.0))
    assert a == b


def test_rounding_ties_go_away_from_zero():
    # 0.03125 is exact in binary, so it is a true tie at four decimals.
    key = derive_route_key((0.03125, -0.03125), (0.0, 0.0))
    assert str(key).startswith("0.0313,-0.0313-")


def test_reversed_swaps_endpoints():
    key = derive_route_key((1.0, 2.0), (3.0, 4.0))
    assert key.reversed() == derive_route_key((3.0, 4.0), (1.0, 2.0))


def test_out_of_range_coordinates_pass_through():
    key = derive_route_key((500.0, -120.0), (0.0, 0.0))
    assert str(key) == "500.0000,-120.0000-0.0000,0.0000"


@pytest.mark.parametrize(
    "point",
    [
        (1.0,),
        (1.0, 2.0, 3.0),
        (math.nan, 1.0),
        (1.0, math.inf),
        ("1.0", 2.0),
        (True, 2.0),
        "1,2",
        None,
    ],
)
def test_malformed_coordinates_are_rejected(point):
    with pytest.raises(InvalidInput):
        derive_route_key(point, (0.0, 0.0))


def test_geocoding_key_folds_case_only():
    assert derive_geocoding_key("Paris, France") == "paris, france"
    assert derive_geocoding_key(" Paris ") == " paris "


def test_geocoding_key_rejects_non_strings():
    with pytest.raises(InvalidInput):
        derive_geocoding_key(42)  # type: ignore[arg-type]


def test_huge_coordinates_get_a_key_instead_of_failing():
    key = derive_route_key((1e30, 0.0), (0.0, 0.0))
    assert key.start_lng == int(1e30) * 10**4
    assert key.start_lat == 0
    assert str(key).startswith(f"{int(1e30)}.0000,0.0000-")
