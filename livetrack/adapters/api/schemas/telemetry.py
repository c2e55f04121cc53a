from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel

from livetrack.domain.models import TelemetrySnapshot


class LocationSchema(BaseModel):
    latitude: float
    longitude: float
    speed: float
    heading: float
    battery: float
    range: float
    state: str
    elevation: float
    destination: str = ""
    destination_latitude: float = 0.0
    destination_longitude: float = 0.0
    minutes_to_arrival: float = 0.0
    miles_to_arrival: float = 0.0
    energy_at_arrival: int = 0
    traffic_minutes_delay: float = 0.0
    updated_at: datetime | None = None

    @classmethod
    def from_snapshot(cls, snapshot: TelemetrySnapshot) -> LocationSchema:
        schema = cls(
            latitude=snapshot.latitude,
            longitude=snapshot.longitude,
            speed=snapshot.speed,
            heading=snapshot.heading,
            battery=snapshot.battery,
            range=snapshot.range_km,
            state=snapshot.state,
            elevation=snapshot.elevation,
            updated_at=snapshot.updated_at,
        )
        route = snapshot.route
        if route is None:
            return schema
        return schema.model_copy(
            update={
                "destination": route.destination,
                "destination_latitude": route.destination_lat,
                "destination_longitude": route.destination_lon,
                "minutes_to_arrival": route.minutes_to_arrival,
                "miles_to_arrival": route.miles_to_arrival,
                "energy_at_arrival": route.energy_at_arrival,
                "traffic_minutes_delay": route.traffic_minutes_delay,
            }
        )


class LocalTimeSchema(BaseModel):
    time: str
    timezone: str


class OverlayDataSchema(BaseModel):
    content: str


class HealthSchema(BaseModel):
    status: str
    feed_connected: bool
