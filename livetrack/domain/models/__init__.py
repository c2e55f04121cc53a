from .config import RuntimeConfig
from .enrichment import LocalTime, WeatherReport
from .geo import GeoPoint
from .session import AdminSession
from .telemetry import ActiveRoute, TelemetryField, TelemetrySnapshot

__all__ = [
    "ActiveRoute",
    "AdminSession",
    "GeoPoint",
    "LocalTime",
    "RuntimeConfig",
    "TelemetryField",
    "TelemetrySnapshot",
    "WeatherReport",
]
