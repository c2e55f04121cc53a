from __future__ import annotations

from abc import ABC, abstractmethod

from livetrack.domain.models import GeoPoint


class IPlaceNameProvider(ABC):
    """Port for reverse geocoding a position into a short place label."""

    @abstractmethod
    async def place_name(self, point: GeoPoint) -> str:
        """Return a place label, or the coordinate label on failure."""
