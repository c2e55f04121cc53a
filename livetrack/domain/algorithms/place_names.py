from __future__ import annotations

from typing import Any, Mapping


def _first_present(address: Mapping[str, Any], *keys: str) -> str | None:
    for key in keys:
        value = address.get(key)
        if isinstance(value, str) and value:
            return value
    return None


def place_name_from_address(
    address: Mapping[str, Any] | None, display_name: str | None = None
) -> str | None:
    """Pick a short human label from a reverse-geocoding address block.

    Priority: suburb/neighbourhood, then city/town/village, then state. With
    several parts only the most and least specific are kept ("Suburb, State").
    Falls back to the first segment of `display_name`. Returns None when
    neither yields anything.
    """

    parts: list[str] = []
    if address:
        for keys in (
            ("suburb", "neighbourhood"),
            ("city", "town", "village"),
            ("state",),
        ):
            value = _first_present(address, *keys)
            if value:
                parts.append(value)

    if len(parts) == 1:
        return parts[0]
    if parts:
        return f"{parts[0]}, {parts[-1]}"

    if display_name:
        head = display_name.split(",", 1)[0].strip()
        if head:
            return head
    return None


def timezone_label(zone_name: str) -> str:
    """'Australia/Perth' -> 'Perth', 'America/New_York' -> 'New York'."""

    if "/" not in zone_name:
        return zone_name
    return zone_name.rsplit("/", 1)[-1].replace("_", " ")
