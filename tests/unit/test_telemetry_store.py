from __future__ import annotations

import json
import threading
from datetime import datetime, timedelta, timezone

import pytest

from livetrack.app.services.telemetry_store import TelemetryStore
from livetrack.domain.models import TelemetryField, TelemetrySnapshot


class _StepClock:
    def __init__(self) -> None:
        self.now = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


def _route_json(**overrides: object) -> str:
    payload: dict[str, object] = {
        "destination": "Fremantle",
        "energy_at_arrival": 61.6,
        "miles_to_arrival": 10.0,
        "minutes_to_arrival": 18.5,
        "traffic_minutes_delay": 2.0,
        "location": {"latitude": -32.0569, "longitude": 115.7439},
        "error": None,
    }
    payload.update(overrides)
    return json.dumps(payload)


def test_initial_snapshot_has_zero_values() -> None:
    snapshot = TelemetryStore().read_snapshot()

    assert snapshot == TelemetrySnapshot()
    assert snapshot.updated_at is None
    assert snapshot.route is None


def test_numeric_update_is_stored_and_stamps_time() -> None:
    clock = _StepClock()
    store = TelemetryStore(clock=clock)

    assert store.apply_update(TelemetryField.LATITUDE, "-31.9522") is True

    snapshot = store.read_snapshot()
    assert snapshot.latitude == -31.9522
    assert snapshot.updated_at == clock.now


def test_each_field_maps_to_its_own_attribute() -> None:
    store = TelemetryStore()
    store.apply_update(TelemetryField.LONGITUDE, "115.8614")
    store.apply_update(TelemetryField.SPEED, "72")
    store.apply_update(TelemetryField.HEADING, "184")
    store.apply_update(TelemetryField.BATTERY_LEVEL, "81")
    store.apply_update(TelemetryField.RANGE_KM, "312.4")
    store.apply_update(TelemetryField.ELEVATION, "12.5")
    store.apply_update(TelemetryField.STATE, " driving\n")

    s = store.read_snapshot()
    assert (s.longitude, s.speed, s.heading) == (115.8614, 72.0, 184.0)
    assert (s.battery, s.range_km, s.elevation) == (81.0, 312.4, 12.5)
    assert s.state == "driving"
    assert s.latitude == 0.0


@pytest.mark.parametrize("raw", ["abc", "", "nan", "inf", "-Infinity"])
def test_undecodable_numeric_value_keeps_previous(raw: str) -> None:
    clock = _StepClock()
    store = TelemetryStore(clock=clock)
    store.apply_update(TelemetryField.SPEED, "50")
    before = store.read_snapshot()

    clock.advance(5)
    assert store.apply_update(TelemetryField.SPEED, raw) is False

    assert store.read_snapshot() == before


@pytest.mark.parametrize(
    ("field", "raw"),
    [
        (TelemetryField.LATITUDE, "90.5"),
        (TelemetryField.LATITUDE, "-91"),
        (TelemetryField.LONGITUDE, "180.01"),
    ],
)
def test_out_of_range_coordinates_are_dropped(field: TelemetryField, raw: str) -> None:
    store = TelemetryStore()
    assert store.apply_update(field, raw) is False
    assert store.read_snapshot().updated_at is None


def test_later_write_wins() -> None:
    store = TelemetryStore()
    store.apply_update(TelemetryField.BATTERY_LEVEL, "80")
    store.apply_update(TelemetryField.BATTERY_LEVEL, "79")

    assert store.read_snapshot().battery == 79.0


def test_route_is_stored_without_touching_updated_at() -> None:
    clock = _StepClock()
    store = TelemetryStore(clock=clock)
    store.apply_update(TelemetryField.LATITUDE, "-32.0")
    stamped = store.read_snapshot().updated_at

    clock.advance(30)
    assert store.apply_update(TelemetryField.ACTIVE_ROUTE, _route_json()) is True

    snapshot = store.read_snapshot()
    assert snapshot.updated_at == stamped
    route = snapshot.route
    assert route is not None
    assert route.destination == "Fremantle"
    assert (route.destination_lat, route.destination_lon) == (-32.0569, 115.7439)
    assert route.energy_at_arrival == 62
    assert route.minutes_to_arrival == 18.5
    assert abs(route.km_to_arrival - 16.0934) < 1e-9


@pytest.mark.parametrize("error", ["no_route", "not_navigating"])
def test_route_error_clears_previous_route(error: str) -> None:
    store = TelemetryStore()
    store.apply_update(TelemetryField.ACTIVE_ROUTE, _route_json())

    cleared = json.dumps({"destination": None, "location": None, "error": error})
    assert store.apply_update(TelemetryField.ACTIVE_ROUTE, cleared) is True

    assert store.read_snapshot().route is None


@pytest.mark.parametrize("error", ["", "null"])
def test_blank_route_error_means_route_present(error: str) -> None:
    store = TelemetryStore()
    store.apply_update(TelemetryField.ACTIVE_ROUTE, _route_json(error=error))

    assert store.read_snapshot().route is not None


def test_route_with_missing_fields_uses_zero_values() -> None:
    store = TelemetryStore()
    store.apply_update(TelemetryField.ACTIVE_ROUTE, '{"destination": "Home"}')

    route = store.read_snapshot().route
    assert route is not None
    assert (route.destination_lat, route.destination_lon) == (0.0, 0.0)
    assert route.energy_at_arrival == 0


@pytest.mark.parametrize("raw", ["{not json", "[1, 2]", '{"energy_at_arrival": "lots"}'])
def test_malformed_route_payload_is_dropped(raw: str) -> None:
    store = TelemetryStore()
    store.apply_update(TelemetryField.ACTIVE_ROUTE, _route_json())
    before = store.read_snapshot()

    assert store.apply_update(TelemetryField.ACTIVE_ROUTE, raw) is False
    assert store.read_snapshot() == before


def test_snapshots_are_immutable_values() -> None:
    store = TelemetryStore()
    first = store.read_snapshot()
    store.apply_update(TelemetryField.SPEED, "10")

    assert first.speed == 0.0
    assert store.read_snapshot().speed == 10.0


def test_concurrent_writers_never_lose_fields() -> None:
    store = TelemetryStore()

    def _write(field: TelemetryField, value: str) -> None:
        for _ in range(500):
            store.apply_update(field, value)

    threads = [
        threading.Thread(target=_write, args=(TelemetryField.LATITUDE, "-31.5")),
        threading.Thread(target=_write, args=(TelemetryField.LONGITUDE, "115.5")),
        threading.Thread(target=_write, args=(TelemetryField.SPEED, "88")),
    ]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    s = store.read_snapshot()
    assert (s.latitude, s.longitude, s.speed) == (-31.5, 115.5, 88.0)
