from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class WeatherReport:
    description: str
    temperature: float = 0.0  # celsius
    humidity: int = 0  # percent
    wind_speed: float = 0.0  # km/h

    @classmethod
    def unavailable(cls) -> WeatherReport:
        return cls(description="Unavailable")


@dataclass(frozen=True, slots=True)
class LocalTime:
    time: str  # HH:MM:SS
    timezone: str
