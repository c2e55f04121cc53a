from __future__ import annotations

import logging
from dataclasses import dataclass, field

import httpx

from livetrack.app.ports.output import IPlaceNameProvider
from livetrack.domain.algorithms.place_names import place_name_from_address
from livetrack.domain.models import GeoPoint

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class NominatimPlaceNameProvider(IPlaceNameProvider):
    """Reverse geocoding through OpenStreetMap's Nominatim.

    Nominatim's usage policy requires an identifying User-Agent.
    """

    base_url: str = "https://nominatim.openstreetmap.org/reverse"
    timeout_s: float = 10.0
    user_agent: str = "livetrack/0.1 (tesla-location-server)"
    transport: httpx.AsyncBaseTransport | None = field(default=None, repr=False)

    async def place_name(self, point: GeoPoint) -> str:
        params = {
            "format": "json",
            "lat": f"{point.lat:.6f}",
            "lon": f"{point.lon:.6f}",
            "zoom": "14",
            "addressdetails": "1",
        }
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout_s,
                transport=self.transport,
                headers={"User-Agent": self.user_agent},
            ) as client:
                resp = await client.get(self.base_url, params=params)
                resp.raise_for_status()
                body = resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Place name lookup failed: %s", exc)
            return point.label()

        if not isinstance(body, dict):
            return point.label()

        address = body.get("address")
        display_name = body.get("display_name")
        name = place_name_from_address(
            address if isinstance(address, dict) else None,
            display_name if isinstance(display_name, str) else None,
        )
        return name or point.label()
