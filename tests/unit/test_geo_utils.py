from __future__ import annotations

from livetrack.domain.algorithms.geo_utils import great_circle_distance_km
from livetrack.domain.models.geo import GeoPoint


def test_distance_zero_for_identical_points() -> None:
    p = GeoPoint(lat=-31.95, lon=115.86)
    assert great_circle_distance_km(p, p) == 0.0


def test_distance_is_symmetric_and_reasonable_scale() -> None:
    # 1 degree of latitude is about 111km.
    a = GeoPoint(lat=0.0, lon=0.0)
    b = GeoPoint(lat=1.0, lon=0.0)

    d1 = great_circle_distance_km(a, b)
    d2 = great_circle_distance_km(b, a)

    assert abs(d1 - d2) < 1e-9
    assert 110.0 < d1 < 112.0


def test_perth_to_baldivis() -> None:
    perth = GeoPoint(lat=-31.9522, lon=115.8614)
    baldivis = GeoPoint(lat=-32.2833, lon=115.8420)

    assert 36.0 < great_circle_distance_km(perth, baldivis) < 38.0


def test_antipodal_points_do_not_overflow() -> None:
    d = great_circle_distance_km(GeoPoint(lat=0.0, lon=0.0), GeoPoint(lat=0.0, lon=180.0))
    assert 20_000.0 < d < 20_040.0
