from __future__ import annotations

from abc import ABC, abstractmethod

from livetrack.domain.models import GeoPoint, LocalTime


class ITimezoneProvider(ABC):
    """Port for the wall-clock time at a position."""

    @abstractmethod
    async def local_time(self, point: GeoPoint, *, api_key: str) -> LocalTime:
        """Return local time, or UTC labelled "UTC" when the lookup fails."""
