from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class RuntimeConfig:
    """Operator-controlled serving flags and third-party credentials.

    Always replaced as a whole; there is no per-field update.
    """

    map_enabled: bool = True
    overlay_enabled: bool = True
    show_route: bool = True
    mapbox_token: str = ""
    timezonedb_token: str = ""
