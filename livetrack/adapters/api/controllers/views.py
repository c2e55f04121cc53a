from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import HTMLResponse

from livetrack.adapters.api.dependencies import get_view_service
from livetrack.adapters.api.rendering import templates
from livetrack.adapters.api.schemas.config import RuntimeConfigSchema
from livetrack.adapters.api.schemas.telemetry import (
    LocalTimeSchema,
    LocationSchema,
    OverlayDataSchema,
)
from livetrack.app.services.telemetry_view_service import TelemetryViewService
from livetrack.domain.exceptions.livetrack import FeatureDisabled
from livetrack.domain.models import GeoPoint

router = APIRouter(tags=["views"])


def _parse_coordinate(raw: str, *, name: str) -> float:
    try:
        return float(raw)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid {name} parameter")


@router.get("/", response_class=HTMLResponse)
def root_view(
    request: Request,
    service: TelemetryViewService = Depends(get_view_service),
) -> HTMLResponse:
    return templates.TemplateResponse(
        request, "root.html", {"config": service.config()}
    )


@router.get("/overlay", response_class=HTMLResponse)
def overlay_view(request: Request) -> HTMLResponse:
    return templates.TemplateResponse(request, "overlay.html", {})


@router.get("/location", response_model=LocationSchema)
def get_location(
    service: TelemetryViewService = Depends(get_view_service),
) -> LocationSchema:
    try:
        snapshot = service.location()
    except FeatureDisabled as exc:
        raise HTTPException(status_code=403, detail=str(exc))
    return LocationSchema.from_snapshot(snapshot)


@router.get("/local-time", response_model=LocalTimeSchema)
async def get_local_time(
    lat: str | None = Query(default=None),
    lng: str | None = Query(default=None),
    service: TelemetryViewService = Depends(get_view_service),
) -> LocalTimeSchema:
    if not lat or not lng:
        raise HTTPException(status_code=400, detail="Missing lat or lng parameters")

    latitude = _parse_coordinate(lat, name="latitude")
    longitude = _parse_coordinate(lng, name="longitude")
    try:
        point = GeoPoint(lat=latitude, lon=longitude)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    local = await service.local_time(point)
    return LocalTimeSchema(time=local.time, timezone=local.timezone)


@router.get("/overlay-data", response_model=OverlayDataSchema)
async def get_overlay_data(
    service: TelemetryViewService = Depends(get_view_service),
) -> OverlayDataSchema:
    return OverlayDataSchema(content=await service.overlay_content())


@router.get("/config", response_model=RuntimeConfigSchema)
def get_config(
    service: TelemetryViewService = Depends(get_view_service),
) -> RuntimeConfigSchema:
    return RuntimeConfigSchema.from_domain(service.config())
