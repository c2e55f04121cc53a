from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any

import httpx

from livetrack.app.ports.output import IWeatherProvider
from livetrack.domain.algorithms.weather_codes import describe_weather_code
from livetrack.domain.models import GeoPoint, WeatherReport

logger = logging.getLogger(__name__)

_CURRENT_FIELDS = "temperature_2m,relative_humidity_2m,weather_code,wind_speed_10m"


def _number(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    return float(value)


def _parse_current_weather(body: Any) -> WeatherReport | None:
    if not isinstance(body, dict):
        return None
    current = body.get("current")
    if not isinstance(current, dict):
        return None
    # The JSON decoder accepts NaN and Infinity literals.
    if any(
        isinstance(v, float) and not math.isfinite(v) for v in current.values()
    ):
        return None

    try:
        return WeatherReport(
            description=describe_weather_code(int(_number(current.get("weather_code")))),
            temperature=_number(current.get("temperature_2m")),
            humidity=int(_number(current.get("relative_humidity_2m"))),
            wind_speed=_number(current.get("wind_speed_10m")),
        )
    except OverflowError:
        return None


@dataclass(slots=True)
class OpenMeteoWeatherProvider(IWeatherProvider):
    """Current conditions from Open-Meteo (no API key needed).

    Any failure yields `WeatherReport.unavailable()`.
    """

    base_url: str = "https://api.open-meteo.com/v1/forecast"
    timeout_s: float = 10.0
    transport: httpx.AsyncBaseTransport | None = field(default=None, repr=False)

    async def current_weather(self, point: GeoPoint) -> WeatherReport:
        params = {
            "latitude": f"{point.lat:.4f}",
            "longitude": f"{point.lon:.4f}",
            "current": _CURRENT_FIELDS,
        }
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout_s, transport=self.transport
            ) as client:
                resp = await client.get(self.base_url, params=params)
                resp.raise_for_status()
                body = resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Weather lookup failed: %s", exc)
            return WeatherReport.unavailable()

        report = _parse_current_weather(body)
        if report is None:
            logger.warning("Weather response has no usable 'current' block")
            return WeatherReport.unavailable()
        return report
