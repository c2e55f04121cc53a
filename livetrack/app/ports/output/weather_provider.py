from __future__ import annotations

from abc import ABC, abstractmethod

from livetrack.domain.models import GeoPoint, WeatherReport


class IWeatherProvider(ABC):
    """Port for current weather conditions at a position.

    Implementations never raise for upstream failures; they return
    `WeatherReport.unavailable()` instead.
    """

    @abstractmethod
    async def current_weather(self, point: GeoPoint) -> WeatherReport:
        raise NotImplementedError
