from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import httpx

from livetrack.app.ports.output import ITimezoneProvider
from livetrack.domain.algorithms.place_names import timezone_label
from livetrack.domain.models import GeoPoint, LocalTime

logger = logging.getLogger(__name__)

_TIME_FORMAT = "%H:%M:%S"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(slots=True)
class TimezoneDbProvider(ITimezoneProvider):
    """Local time at a position via TimeZoneDB's `get-time-zone` endpoint.

    Falls back to the process clock in UTC (labelled "UTC") when the key is
    missing, the request fails or the API answers with a non-OK status.
    """

    base_url: str = "https://api.timezonedb.com/v2.1/get-time-zone"
    timeout_s: float = 10.0
    clock: Callable[[], datetime] = field(default=_utcnow, repr=False)
    transport: httpx.AsyncBaseTransport | None = field(default=None, repr=False)

    def _utc_fallback(self) -> LocalTime:
        return LocalTime(
            time=self.clock().astimezone(timezone.utc).strftime(_TIME_FORMAT),
            timezone="UTC",
        )

    async def local_time(self, point: GeoPoint, *, api_key: str) -> LocalTime:
        if not api_key:
            logger.debug("No TimeZoneDB token configured; using UTC")
            return self._utc_fallback()

        params = {
            "key": api_key,
            "format": "json",
            "by": "position",
            "lat": f"{point.lat:.6f}",
            "lng": f"{point.lon:.6f}",
        }
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout_s, transport=self.transport
            ) as client:
                resp = await client.get(self.base_url, params=params)
                resp.raise_for_status()
                body = resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            # The exception text may carry the request URL and with it the key.
            logger.warning("Timezone lookup failed: %s", type(exc).__name__)
            return self._utc_fallback()

        if not isinstance(body, dict) or body.get("status") != "OK":
            message = body.get("message") if isinstance(body, dict) else None
            logger.warning("TimeZoneDB API error: %s", message)
            return self._utc_fallback()

        return self._from_response(body)

    def _from_response(self, body: dict[str, Any]) -> LocalTime:
        zone_name = body.get("zoneName")
        if not isinstance(zone_name, str) or not zone_name:
            zone_name = "UTC"

        formatted = body.get("formatted")
        if isinstance(formatted, str) and formatted:
            try:
                parsed = datetime.strptime(formatted, "%Y-%m-%d %H:%M:%S")
            except ValueError:
                pass
            else:
                return LocalTime(
                    time=parsed.strftime(_TIME_FORMAT),
                    timezone=timezone_label(zone_name),
                )

        try:
            tz = ZoneInfo(zone_name)
        except (ZoneInfoNotFoundError, ValueError):
            return self._utc_fallback()
        return LocalTime(
            time=self.clock().astimezone(tz).strftime(_TIME_FORMAT),
            timezone=timezone_label(zone_name),
        )
