from __future__ import annotations

from dataclasses import dataclass, field
from types import SimpleNamespace
from typing import Any

import pytest

from livetrack.adapters.messaging.paho_telemetry_feed import PahoTelemetryFeed, parse_broker
from livetrack.domain.exceptions.livetrack import TelemetryFeedError


def _reason(value: int) -> SimpleNamespace:
    return SimpleNamespace(value=value)


@dataclass
class FakeMqttClient:
    """Answers the CONNECT from `loop_start`, like paho's network thread.

    `connack=None` means the broker never answers.
    """

    client_id: str
    fail_connect: bool = False
    connack: int | None = 0
    connected_to: tuple[str, int, int] | None = None
    credentials: tuple[str, str | None] | None = None
    subscriptions: list[str] = field(default_factory=list)
    loop_running: bool = False
    disconnected: bool = False
    on_connect: Any = None
    on_message: Any = None
    on_disconnect: Any = None

    def enable_logger(self, logger: Any) -> None:
        pass

    def username_pw_set(self, username: str, password: str | None) -> None:
        self.credentials = (username, password)

    def connect(self, host: str, port: int, keepalive: int = 60) -> None:
        if self.fail_connect:
            raise ConnectionRefusedError("refused")
        self.connected_to = (host, port, keepalive)

    def subscribe(self, topic: str, qos: int = 0) -> None:
        self.subscriptions.append(topic)

    def loop_start(self) -> None:
        self.loop_running = True
        if self.connack is not None:
            self.on_connect(self, None, None, _reason(self.connack), None)

    def loop_stop(self) -> None:
        self.loop_running = False

    def disconnect(self) -> None:
        self.disconnected = True


def _feed(
    clients: list[FakeMqttClient],
    received: list[tuple[str, bytes]] | None = None,
    *,
    fail_connect: bool = False,
    connack: int | None = 0,
    on_message: Any = None,
    **kwargs: Any,
) -> PahoTelemetryFeed:
    sink = received if received is not None else []

    def factory(client_id: str) -> Any:
        client = FakeMqttClient(
            client_id=client_id, fail_connect=fail_connect, connack=connack
        )
        clients.append(client)
        return client

    return PahoTelemetryFeed(
        broker=kwargs.pop("broker", "tcp://broker.local:1884"),
        topics=("teslamate/cars/1/latitude", "teslamate/cars/1/speed"),
        on_message=on_message or (lambda topic, payload: sink.append((topic, payload))),
        client_factory=factory,
        **kwargs,
    )


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("tcp://10.0.0.5:1884", ("10.0.0.5", 1884)),
        ("mqtt.local", ("mqtt.local", 1883)),
        ("mqtt.local:8883", ("mqtt.local", 8883)),
        ("tcp://mqtt.local/", ("mqtt.local", 1883)),
    ],
)
def test_parse_broker(raw: str, expected: tuple[str, int]) -> None:
    assert parse_broker(raw) == expected


def test_parse_broker_rejects_empty() -> None:
    with pytest.raises(ValueError):
        parse_broker("  ")


def test_start_connects_and_subscribes_on_connack() -> None:
    clients: list[FakeMqttClient] = []
    feed = _feed(clients, username="tm", password="pw", keepalive=30)

    feed.start()
    client = clients[0]

    assert client.client_id == "tesla-location-server"
    assert client.connected_to == ("broker.local", 1884, 30)
    assert client.credentials == ("tm", "pw")
    assert client.loop_running is True
    assert feed.is_connected is True
    assert client.subscriptions == list(feed.topics)


@pytest.mark.parametrize("code", [4, 5, 135])
def test_refused_connack_aborts_start(code: int) -> None:
    clients: list[FakeMqttClient] = []
    feed = _feed(clients, connack=code)

    with pytest.raises(TelemetryFeedError, match="refused"):
        feed.start()

    client = clients[0]
    assert client.subscriptions == []
    assert client.loop_running is False
    assert feed.is_connected is False


def test_missing_connack_times_out() -> None:
    clients: list[FakeMqttClient] = []
    feed = _feed(clients, connack=None, connect_timeout_s=0.05)

    with pytest.raises(TelemetryFeedError, match="did not answer"):
        feed.start()
    assert clients[0].loop_running is False


def test_later_reconnect_resubscribes() -> None:
    clients: list[FakeMqttClient] = []
    feed = _feed(clients)
    feed.start()
    client = clients[0]

    client.on_disconnect(client, None, None, _reason(7), None)
    assert feed.is_connected is False

    client.on_connect(client, None, None, _reason(0), None)

    assert feed.is_connected is True
    assert client.subscriptions == list(feed.topics) * 2


def test_messages_are_forwarded() -> None:
    clients: list[FakeMqttClient] = []
    received: list[tuple[str, bytes]] = []
    _feed(clients, received).start()

    msg = SimpleNamespace(topic="teslamate/cars/1/speed", payload=b"64")
    clients[0].on_message(clients[0], None, msg)

    assert received == [("teslamate/cars/1/speed", b"64")]


def test_handler_errors_do_not_escape_the_network_thread() -> None:
    clients: list[FakeMqttClient] = []

    def boom(topic: str, payload: bytes) -> None:
        raise RuntimeError("handler bug")

    _feed(clients, on_message=boom).start()

    clients[0].on_message(clients[0], None, SimpleNamespace(topic="t", payload=b"x"))


def test_unreachable_broker_raises_feed_error() -> None:
    clients: list[FakeMqttClient] = []
    feed = _feed(clients, fail_connect=True)

    with pytest.raises(TelemetryFeedError):
        feed.start()
    assert clients[0].loop_running is False


def test_stop_disconnects_and_stops_loop() -> None:
    clients: list[FakeMqttClient] = []
    feed = _feed(clients)
    feed.start()

    feed.stop()

    assert clients[0].disconnected is True
    assert clients[0].loop_running is False
    assert feed.is_connected is False
    feed.stop()
