from __future__ import annotations

import os
import socket

import pytest

from livetrack.adapters.messaging.paho_telemetry_feed import parse_broker


def _broker_reachable(host: str, port: int) -> bool:
    try:
        with socket.create_connection((host, port), timeout=1.5):
            return True
    except OSError:
        return False


@pytest.fixture(scope="session")
def mqtt_broker() -> str:
    """Broker address from MQTT_TEST_BROKER, e.g. `localhost:1883`."""

    broker = (os.getenv("MQTT_TEST_BROKER") or "").strip()
    if not broker:
        pytest.skip("MQTT_TEST_BROKER not set")

    host, port = parse_broker(broker)
    if not _broker_reachable(host, port):
        pytest.skip(f"MQTT broker not reachable at {host}:{port}")
    return broker
