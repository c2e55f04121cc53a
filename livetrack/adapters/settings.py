from __future__ import annotations

import os
from dataclasses import dataclass

from livetrack.domain.models import GeoPoint, RuntimeConfig


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_str(name: str, default: str = "") -> str:
    return (os.getenv(name) or default).strip()


@dataclass(frozen=True, slots=True)
class ServerSettings:
    """Boot-time settings read once from the environment.

    Env vars:
      - MQTT_BROKER: `host[:port]`, optional `tcp://` prefix (port 1883 default)
      - MQTT_USERNAME, MQTT_PASSWORD, MQTT_CLIENT_ID, MQTT_KEEPALIVE
      - MQTT_CONNECT_TIMEOUT_S: wait for the first CONNACK (default 10)
      - MQTT_NAMESPACE (default teslamate), MQTT_CAR_ID (default 1)
      - MQTT_ENABLED: defaults to true when MQTT_BROKER is set
      - ADMIN_USERNAME, ADMIN_PASSWORD
      - MAPBOX_TOKEN, TIMEZONEDB_TOKEN
      - MAP_ENABLED, OVERLAY_ENABLED, SHOW_ROUTE (default true)
      - HOME_LAT, HOME_LON, HOME_LABEL
      - HTTP_TIMEOUT_S (default 10), SESSION_COOKIE_SECURE
      - HOST, PORT (default 8081), LOG_LEVEL, PUBLIC_DIR
      - LIVETRACK_REVEAL_ERRORS (read by the app, not stored here)
    """

    mqtt_broker: str = ""
    mqtt_username: str | None = None
    mqtt_password: str | None = None
    mqtt_client_id: str = "tesla-location-server"
    mqtt_keepalive: int = 60
    mqtt_connect_timeout_s: float = 10.0
    mqtt_namespace: str = "teslamate"
    mqtt_car_id: str = "1"
    mqtt_enabled: bool = False
    admin_username: str = ""
    admin_password: str = ""
    initial_config: RuntimeConfig = RuntimeConfig()
    home: GeoPoint = GeoPoint(lat=-32.2833, lon=115.8420)
    home_label: str = "Home"
    http_timeout_s: float = 10.0
    session_cookie_secure: bool = False
    host: str = "0.0.0.0"
    port: int = 8081
    log_level: str = "INFO"
    public_dir: str = "public"

    @staticmethod
    def from_env() -> "ServerSettings":
        broker = _env_str("MQTT_BROKER")
        defaults = ServerSettings()

        home = defaults.home
        if os.getenv("HOME_LAT") and os.getenv("HOME_LON"):
            home = GeoPoint(
                lat=float(os.environ["HOME_LAT"]), lon=float(os.environ["HOME_LON"])
            )

        return ServerSettings(
            mqtt_broker=broker,
            mqtt_username=_env_str("MQTT_USERNAME") or None,
            mqtt_password=os.getenv("MQTT_PASSWORD") or None,
            mqtt_client_id=_env_str("MQTT_CLIENT_ID", defaults.mqtt_client_id),
            mqtt_keepalive=int(os.getenv("MQTT_KEEPALIVE") or defaults.mqtt_keepalive),
            mqtt_connect_timeout_s=float(
                os.getenv("MQTT_CONNECT_TIMEOUT_S") or defaults.mqtt_connect_timeout_s
            ),
            mqtt_namespace=_env_str("MQTT_NAMESPACE", defaults.mqtt_namespace),
            mqtt_car_id=_env_str("MQTT_CAR_ID", defaults.mqtt_car_id),
            mqtt_enabled=_env_bool("MQTT_ENABLED", bool(broker)),
            admin_username=_env_str("ADMIN_USERNAME"),
            admin_password=os.getenv("ADMIN_PASSWORD") or "",
            initial_config=RuntimeConfig(
                map_enabled=_env_bool("MAP_ENABLED", True),
                overlay_enabled=_env_bool("OVERLAY_ENABLED", True),
                show_route=_env_bool("SHOW_ROUTE", True),
                mapbox_token=_env_str("MAPBOX_TOKEN"),
                timezonedb_token=_env_str("TIMEZONEDB_TOKEN"),
            ),
            home=home,
            home_label=_env_str("HOME_LABEL", defaults.home_label),
            http_timeout_s=float(os.getenv("HTTP_TIMEOUT_S") or defaults.http_timeout_s),
            session_cookie_secure=_env_bool("SESSION_COOKIE_SECURE", False),
            host=_env_str("HOST", defaults.host),
            port=int(os.getenv("PORT") or defaults.port),
            log_level=_env_str("LOG_LEVEL", defaults.log_level).upper(),
            public_dir=_env_str("PUBLIC_DIR", defaults.public_dir),
        )
