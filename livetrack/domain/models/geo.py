from __future__ import annotations

from dataclasses import dataclass

_LIMITS = (("latitude", "lat", 90.0), ("longitude", "lon", 180.0))


@dataclass(frozen=True, slots=True)
class GeoPoint:
    """WGS84 position in decimal degrees.

    Vehicle positions, the home reference and `/local-time` query points
    all pass through here, so NaN is rejected along with out-of-range
    values.
    """

    lat: float
    lon: float

    def __post_init__(self) -> None:
        for name, attr, limit in _LIMITS:
            value = getattr(self, attr)
            if not abs(value) <= limit:
                raise ValueError(f"Invalid {name}: {value}")

    def label(self) -> str:
        """Coordinate label used when no place name is available."""

        return f"{self.lat:.4f}°, {self.lon:.4f}°"
