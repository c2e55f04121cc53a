from __future__ import annotations

import math

from livetrack.domain.models import GeoPoint

EARTH_RADIUS_KM = 6371.0


def great_circle_distance_km(a: GeoPoint, b: GeoPoint) -> float:
    """Great-circle (haversine) distance in kilometres."""

    lat1 = math.radians(a.lat)
    lon1 = math.radians(a.lon)
    lat2 = math.radians(b.lat)
    lon2 = math.radians(b.lon)

    dlat = lat2 - lat1
    dlon = lon2 - lon1

    s = (
        math.sin(dlat / 2.0) ** 2
        + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2.0) ** 2
    )
    # Rounding can push s a hair above 1 for antipodal points.
    return 2.0 * EARTH_RADIUS_KM * math.asin(math.sqrt(min(1.0, s)))
