"""Threaded paho-mqtt client feeding telemetry messages to a callback."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Sequence
from typing import Any, cast

import paho.mqtt.client as mqtt

from livetrack.app.ports.output import ITelemetryFeed
from livetrack.domain.exceptions.livetrack import TelemetryFeedError

DEFAULT_MQTT_PORT = 1883
DEFAULT_CONNECT_TIMEOUT_S = 10.0


def parse_broker(raw_broker: str, default_port: int = DEFAULT_MQTT_PORT) -> tuple[str, int]:
    """Split `tcp://host:port` / `host:port` / `host` into host and port."""

    value = raw_broker.strip()
    if not value:
        raise ValueError("Broker value is empty")

    if "://" in value:
        value = value.split("://", 1)[1]
    if "/" in value:
        value = value.split("/", 1)[0]

    host, _, maybe_port = value.rpartition(":")
    if host and maybe_port.isdigit():
        return host, int(maybe_port)
    return value, default_port


def _default_client_factory(client_id: str) -> mqtt.Client:
    return mqtt.Client(
        callback_api_version=cast(Any, mqtt).CallbackAPIVersion.VERSION2,
        client_id=client_id,
    )


class PahoTelemetryFeed(ITelemetryFeed):
    """Subscribes to a fixed topic set and forwards every message.

    `on_message(topic, payload)` runs on paho's network thread. Reconnects
    after the initial connect are left to paho; topics are re-subscribed in
    `on_connect` so a reconnect restores the subscriptions.

    `start` blocks until the broker answers the first CONNECT and raises
    TelemetryFeedError if it refuses or does not answer in time.
    """

    def __init__(
        self,
        *,
        broker: str,
        topics: Sequence[str],
        on_message: Callable[[str, bytes], object],
        client_id: str = "tesla-location-server",
        username: str | None = None,
        password: str | None = None,
        keepalive: int = 60,
        connect_timeout_s: float = DEFAULT_CONNECT_TIMEOUT_S,
        logger: logging.Logger | None = None,
        client_factory: Callable[[str], mqtt.Client] = _default_client_factory,
    ) -> None:
        self._host, self._port = parse_broker(broker)
        self._topics = tuple(topics)
        self._on_message = on_message
        self._client_id = client_id
        self._username = username
        self._password = password
        self._keepalive = keepalive
        self._connect_timeout_s = connect_timeout_s
        self._logger = logger or logging.getLogger(__name__)
        self._client_factory = client_factory
        self._client: mqtt.Client | None = None
        self._connected = False

    @property
    def is_connected(self) -> bool:
        return self._connected

    @property
    def topics(self) -> tuple[str, ...]:
        return self._topics

    def start(self) -> None:
        self.stop()
        self._logger.info(
            "Connecting to MQTT broker %s:%s as %s", self._host, self._port, self._client_id
        )

        client = self._client_factory(self._client_id)
        client.enable_logger(self._logger)
        if self._username:
            client.username_pw_set(self._username, self._password)

        first_connack = threading.Event()
        first_reason: list[Any] = []

        def on_connect(
            c: mqtt.Client,
            _userdata: Any,
            _flags: Any,
            reason_code: Any,
            _properties: Any,
        ) -> None:
            if not first_connack.is_set():
                first_reason.append(reason_code)
                first_connack.set()
            if reason_code.value != 0:
                self._logger.warning("MQTT connect refused: %s", reason_code)
                return
            self._connected = True
            self._logger.info("Connected to MQTT broker")
            for topic in self._topics:
                c.subscribe(topic, qos=0)
                self._logger.info("Subscribed to %s", topic)

        def on_message(_c: mqtt.Client, _userdata: Any, msg: mqtt.MQTTMessage) -> None:
            try:
                self._on_message(msg.topic, msg.payload)
            except Exception:
                self._logger.exception("Telemetry handler failed for topic=%s", msg.topic)

        def on_disconnect(
            _c: mqtt.Client,
            _userdata: Any,
            _disconnect_flags: Any,
            reason_code: Any,
            _properties: Any,
        ) -> None:
            was_connected = self._connected
            self._connected = False
            if was_connected:
                self._logger.warning("MQTT connection lost: %s", reason_code)

        client.on_connect = on_connect
        client.on_message = on_message
        client.on_disconnect = on_disconnect

        try:
            client.connect(self._host, self._port, keepalive=self._keepalive)
        except OSError as exc:
            self._logger.error(
                "MQTT connect to %s:%s failed: %s", self._host, self._port, exc
            )
            raise TelemetryFeedError(
                f"Cannot connect to MQTT broker {self._host}:{self._port}: {exc}"
            ) from exc

        client.loop_start()
        self._client = client

        if not first_connack.wait(self._connect_timeout_s):
            self.stop()
            raise TelemetryFeedError(
                f"MQTT broker {self._host}:{self._port} did not answer within "
                f"{self._connect_timeout_s:g}s"
            )
        if first_reason[0].value != 0:
            self.stop()
            raise TelemetryFeedError(
                f"MQTT broker {self._host}:{self._port} refused the connection: "
                f"{first_reason[0]}"
            )

    def stop(self) -> None:
        client = self._client
        self._client = None
        self._connected = False
        if client is None:
            return
        try:
            client.disconnect()
        finally:
            client.loop_stop()
            self._logger.info("MQTT network loop stopped")
