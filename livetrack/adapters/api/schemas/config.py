from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from livetrack.domain.models import RuntimeConfig


class RuntimeConfigSchema(BaseModel):
    """Full configuration record.

    Omitted fields take zero values; a submission always replaces the
    whole record.
    """

    # "off", 1 and similar are rejected instead of coerced.
    model_config = ConfigDict(strict=True)

    show_route: bool = False
    mapbox_token: str = ""
    map_enabled: bool = False
    overlay_enabled: bool = False
    timezonedb_token: str = ""

    @classmethod
    def from_domain(cls, config: RuntimeConfig) -> RuntimeConfigSchema:
        return cls(
            show_route=config.show_route,
            mapbox_token=config.mapbox_token,
            map_enabled=config.map_enabled,
            overlay_enabled=config.overlay_enabled,
            timezonedb_token=config.timezonedb_token,
        )

    def to_domain(self) -> RuntimeConfig:
        return RuntimeConfig(
            map_enabled=self.map_enabled,
            overlay_enabled=self.overlay_enabled,
            show_route=self.show_route,
            mapbox_token=self.mapbox_token,
            timezonedb_token=self.timezonedb_token,
        )
