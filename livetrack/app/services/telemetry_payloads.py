"""Pydantic models for structured MQTT payloads."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from livetrack.domain.models import ActiveRoute


class RouteLocationPayload(BaseModel):
    model_config = ConfigDict(extra="ignore", allow_inf_nan=False)

    latitude: float | None = None
    longitude: float | None = None


class ActiveRoutePayload(BaseModel):
    """`active_route` message as published by TeslaMate.

    When no route is active the logger sends `error` (e.g. "no_route") and
    nulls for everything else.
    """

    model_config = ConfigDict(extra="ignore", allow_inf_nan=False)

    destination: str | None = None
    energy_at_arrival: float | None = None
    miles_to_arrival: float | None = None
    minutes_to_arrival: float | None = None
    traffic_minutes_delay: float | None = None
    location: RouteLocationPayload | None = None
    error: str | None = None

    @property
    def has_route(self) -> bool:
        return self.error is None or self.error.strip() in {"", "null"}

    def to_route(self) -> ActiveRoute:
        location = self.location or RouteLocationPayload()
        return ActiveRoute(
            destination=self.destination or "",
            destination_lat=location.latitude or 0.0,
            destination_lon=location.longitude or 0.0,
            minutes_to_arrival=self.minutes_to_arrival or 0.0,
            miles_to_arrival=self.miles_to_arrival or 0.0,
            energy_at_arrival=int(round(self.energy_at_arrival or 0.0)),
            traffic_minutes_delay=self.traffic_minutes_delay or 0.0,
        )
