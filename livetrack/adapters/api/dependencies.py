from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

from fastapi import Depends, Request

from livetrack.adapters.enrichment.nominatim_place_name_provider import (
    NominatimPlaceNameProvider,
)
from livetrack.adapters.enrichment.open_meteo_weather_provider import (
    OpenMeteoWeatherProvider,
)
from livetrack.adapters.enrichment.timezonedb_provider import TimezoneDbProvider
from livetrack.adapters.messaging.paho_telemetry_feed import PahoTelemetryFeed
from livetrack.adapters.settings import ServerSettings
from livetrack.app.ports.output import ITelemetryFeed
from livetrack.app.services.access_gate import AccessGate
from livetrack.app.services.config_store import ConfigStore
from livetrack.app.services.telemetry_dispatcher import TelemetryDispatcher, TopicScheme
from livetrack.app.services.telemetry_store import TelemetryStore
from livetrack.app.services.telemetry_view_service import TelemetryViewService
from livetrack.domain.exceptions.livetrack import AdminLoginRequired
from livetrack.domain.models import AdminSession

SESSION_COOKIE = "admin-session"


@dataclass(slots=True)
class ServiceContainer:
    """Process-wide shared state, created once and injected into handlers."""

    settings: ServerSettings
    telemetry_store: TelemetryStore
    config_store: ConfigStore
    access_gate: AccessGate
    dispatcher: TelemetryDispatcher
    view_service: TelemetryViewService
    feed: ITelemetryFeed | None = None


def build_container(settings: ServerSettings) -> ServiceContainer:
    telemetry_store = TelemetryStore()
    config_store = ConfigStore(settings.initial_config)
    dispatcher = TelemetryDispatcher(
        telemetry_store,
        TopicScheme(namespace=settings.mqtt_namespace, car_id=settings.mqtt_car_id),
    )

    view_service = TelemetryViewService(
        telemetry_store=telemetry_store,
        config_store=config_store,
        weather_provider=OpenMeteoWeatherProvider(timeout_s=settings.http_timeout_s),
        place_name_provider=NominatimPlaceNameProvider(
            timeout_s=settings.http_timeout_s
        ),
        timezone_provider=TimezoneDbProvider(timeout_s=settings.http_timeout_s),
        home=settings.home,
        home_label=settings.home_label,
    )

    feed: ITelemetryFeed | None = None
    if settings.mqtt_enabled and settings.mqtt_broker:
        feed = PahoTelemetryFeed(
            broker=settings.mqtt_broker,
            topics=dispatcher.topics,
            on_message=dispatcher.dispatch,
            client_id=settings.mqtt_client_id,
            username=settings.mqtt_username,
            password=settings.mqtt_password,
            keepalive=settings.mqtt_keepalive,
            connect_timeout_s=settings.mqtt_connect_timeout_s,
        )

    return ServiceContainer(
        settings=settings,
        telemetry_store=telemetry_store,
        config_store=config_store,
        access_gate=AccessGate(
            username=settings.admin_username, password=settings.admin_password
        ),
        dispatcher=dispatcher,
        view_service=view_service,
        feed=feed,
    )


@lru_cache(maxsize=1)
def get_container() -> ServiceContainer:
    return build_container(ServerSettings.from_env())


def get_view_service(
    container: ServiceContainer = Depends(get_container),
) -> TelemetryViewService:
    return container.view_service


def get_config_store(
    container: ServiceContainer = Depends(get_container),
) -> ConfigStore:
    return container.config_store


def get_access_gate(
    container: ServiceContainer = Depends(get_container),
) -> AccessGate:
    return container.access_gate


def get_settings(
    container: ServiceContainer = Depends(get_container),
) -> ServerSettings:
    return container.settings


def require_admin_session(
    request: Request,
    gate: AccessGate = Depends(get_access_gate),
) -> AdminSession:
    # Re-checked on every request; nothing about authorization is cached.
    session = gate.authenticate(request.cookies.get(SESSION_COOKIE))
    if session is None:
        raise AdminLoginRequired()
    return session
