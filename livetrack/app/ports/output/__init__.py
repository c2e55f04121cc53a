from .place_name_provider import IPlaceNameProvider
from .telemetry_feed import ITelemetryFeed
from .timezone_provider import ITimezoneProvider
from .weather_provider import IWeatherProvider

__all__ = [
    "IPlaceNameProvider",
    "ITelemetryFeed",
    "ITimezoneProvider",
    "IWeatherProvider",
]
