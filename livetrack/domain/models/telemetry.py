from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from .geo import GeoPoint


class TelemetryField(str, Enum):
    """Fields published by the vehicle logger, one MQTT topic each."""

    LATITUDE = "latitude"
    LONGITUDE = "longitude"
    SPEED = "speed"
    HEADING = "heading"
    BATTERY_LEVEL = "battery_level"
    RANGE_KM = "est_battery_range_km"
    STATE = "state"
    ELEVATION = "elevation"
    ACTIVE_ROUTE = "active_route"


@dataclass(frozen=True, slots=True)
class ActiveRoute:
    """Navigation route as published in a single `active_route` message."""

    destination: str
    destination_lat: float
    destination_lon: float
    minutes_to_arrival: float = 0.0
    miles_to_arrival: float = 0.0
    energy_at_arrival: int = 0
    traffic_minutes_delay: float = 0.0

    @property
    def km_to_arrival(self) -> float:
        return self.miles_to_arrival * 1.60934


@dataclass(frozen=True, slots=True)
class TelemetrySnapshot:
    """Latest known vehicle state at one instant.

    Scalar fields start at zero values and are replaced independently.
    `route` is either a whole ActiveRoute or None.
    """

    latitude: float = 0.0
    longitude: float = 0.0
    speed: float = 0.0
    heading: float = 0.0
    battery: float = 0.0
    range_km: float = 0.0
    state: str = ""
    elevation: float = 0.0
    route: ActiveRoute | None = None
    updated_at: datetime | None = None

    @property
    def position(self) -> GeoPoint:
        return GeoPoint(lat=self.latitude, lon=self.longitude)
