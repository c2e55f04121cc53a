from __future__ import annotations

import asyncio
from dataclasses import dataclass

from livetrack.app.ports.output import (
    IPlaceNameProvider,
    ITimezoneProvider,
    IWeatherProvider,
)
from livetrack.app.services.config_store import ConfigStore
from livetrack.app.services.telemetry_store import TelemetryStore
from livetrack.domain.algorithms.geo_utils import great_circle_distance_km
from livetrack.domain.exceptions.livetrack import FeatureDisabled
from livetrack.domain.models import (
    GeoPoint,
    LocalTime,
    RuntimeConfig,
    TelemetrySnapshot,
    WeatherReport,
)

OVERLAY_DISABLED_MESSAGE = "Overlay is disabled in configuration."


def format_overlay(
    *,
    snapshot: TelemetrySnapshot,
    place_name: str,
    local_time: LocalTime,
    weather: WeatherReport,
    home_distance_km: float,
    home_label: str = "Home",
) -> str:
    lines = [f"📍 Location: {place_name}"]
    route = snapshot.route
    if route is not None and route.destination:
        lines.append(f"🎯 Destination: {route.destination}")
        lines.append(f"📏 Distance to Destination: {route.km_to_arrival:.1f} km")
    lines.append(f"📏 Distance from {home_label}: {home_distance_km:.0f} km")
    lines.append("")
    lines.append(f"🕒 Local Time: {local_time.time} ({local_time.timezone})")
    lines.append(f"🌡️ Temperature: {weather.temperature:.1f}°C")
    lines.append(f"🌤️ Conditions: {weather.description}")
    lines.append(f"💨 Wind: {weather.wind_speed:.1f} km/h")
    return "\n".join(lines)


@dataclass(slots=True)
class TelemetryViewService:
    """Builds the payloads served to the map, overlay and config views.

    Every call reads the stores afresh so configuration changes apply to
    the very next request.
    """

    telemetry_store: TelemetryStore
    config_store: ConfigStore
    weather_provider: IWeatherProvider
    place_name_provider: IPlaceNameProvider
    timezone_provider: ITimezoneProvider
    home: GeoPoint = GeoPoint(lat=-32.2833, lon=115.8420)
    home_label: str = "Home"

    def config(self) -> RuntimeConfig:
        return self.config_store.read()

    def location(self) -> TelemetrySnapshot:
        if not self.config_store.read().map_enabled:
            raise FeatureDisabled("Map is disabled in configuration.")
        return self.telemetry_store.read_snapshot()

    async def local_time(self, point: GeoPoint) -> LocalTime:
        token = self.config_store.read().timezonedb_token
        return await self.timezone_provider.local_time(point, api_key=token)

    async def overlay_content(self) -> str:
        config = self.config_store.read()
        if not config.overlay_enabled:
            return OVERLAY_DISABLED_MESSAGE

        snapshot = self.telemetry_store.read_snapshot()
        position = snapshot.position

        # Providers return fallbacks rather than raising on upstream failures.
        place_name, local_time, weather = await asyncio.gather(
            self.place_name_provider.place_name(position),
            self.timezone_provider.local_time(
                position, api_key=config.timezonedb_token
            ),
            self.weather_provider.current_weather(position),
        )

        return format_overlay(
            snapshot=snapshot,
            place_name=place_name,
            local_time=local_time,
            weather=weather,
            home_distance_km=great_circle_distance_km(self.home, position),
            home_label=self.home_label,
        )
