"""Latest-value store for vehicle telemetry.

The store is the only place telemetry is merged. Each write builds a new
immutable `TelemetrySnapshot` and swaps it in under the lock, so readers
always get a whole snapshot and never one that is half-written.
"""

from __future__ import annotations

import logging
import math
import threading
from collections.abc import Callable
from dataclasses import replace
from datetime import datetime, timezone

from pydantic import ValidationError

from livetrack.app.services.telemetry_payloads import ActiveRoutePayload
from livetrack.domain.models import TelemetryField, TelemetrySnapshot

logger = logging.getLogger(__name__)

# TelemetryField -> TelemetrySnapshot attribute, for numeric fields.
_FLOAT_FIELDS: dict[TelemetryField, str] = {
    TelemetryField.LATITUDE: "latitude",
    TelemetryField.LONGITUDE: "longitude",
    TelemetryField.SPEED: "speed",
    TelemetryField.HEADING: "heading",
    TelemetryField.BATTERY_LEVEL: "battery",
    TelemetryField.RANGE_KM: "range_km",
    TelemetryField.ELEVATION: "elevation",
}

_COORDINATE_LIMITS: dict[TelemetryField, float] = {
    TelemetryField.LATITUDE: 90.0,
    TelemetryField.LONGITUDE: 180.0,
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _parse_float(field: TelemetryField, raw: str) -> float | None:
    try:
        value = float(raw.strip())
    except ValueError:
        return None
    # NaN/inf cannot be served as JSON.
    if not math.isfinite(value):
        return None
    limit = _COORDINATE_LIMITS.get(field)
    if limit is not None and abs(value) > limit:
        return None
    return value


class TelemetryStore:
    def __init__(
        self,
        *,
        clock: Callable[[], datetime] = _utcnow,
        initial: TelemetrySnapshot | None = None,
    ) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._snapshot = initial if initial is not None else TelemetrySnapshot()

    def read_snapshot(self) -> TelemetrySnapshot:
        with self._lock:
            return self._snapshot

    def apply_update(self, field: TelemetryField, raw: str) -> bool:
        """Merge one raw bus value into the store.

        Returns False when the value could not be decoded; the stored value
        is left untouched in that case.
        """

        if field is TelemetryField.ACTIVE_ROUTE:
            return self._apply_route(raw)

        if field is TelemetryField.STATE:
            self._write(state=raw.strip())
            return True

        attr = _FLOAT_FIELDS[field]
        value = _parse_float(field, raw)
        if value is None:
            logger.debug("Dropping undecodable %s value %r", field.value, raw)
            return False
        self._write(**{attr: value})
        return True

    def _write(self, **changes: object) -> None:
        with self._lock:
            self._snapshot = replace(
                self._snapshot, updated_at=self._clock(), **changes
            )

    def _apply_route(self, raw: str) -> bool:
        try:
            payload = ActiveRoutePayload.model_validate_json(raw)
        except ValidationError:
            logger.debug("Dropping undecodable active_route payload %r", raw)
            return False

        # Route changes do not count as a position update.
        route = payload.to_route() if payload.has_route else None
        with self._lock:
            self._snapshot = replace(self._snapshot, route=route)
        return True
