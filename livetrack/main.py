from __future__ import annotations

import asyncio
import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles

from livetrack.adapters.api.controllers.admin import router as admin_router
from livetrack.adapters.api.controllers.views import router as views_router
from livetrack.adapters.api.dependencies import (
    SESSION_COOKIE,
    ServiceContainer,
    get_container,
)
from livetrack.adapters.api.schemas.telemetry import HealthSchema
from livetrack.adapters.settings import ServerSettings
from livetrack.domain.exceptions.livetrack import AdminLoginRequired

logger = logging.getLogger("uvicorn.error")


@asynccontextmanager
async def lifespan(app: FastAPI):
    container = get_container()
    settings = container.settings

    if container.feed is not None:
        # Connecting blocks on the socket; a failure here aborts startup.
        await asyncio.to_thread(container.feed.start)
    else:
        logger.warning("MQTT disabled; telemetry will stay at its initial values")

    if not container.access_gate.configured:
        logger.warning("ADMIN_USERNAME/ADMIN_PASSWORD unset; admin panel is disabled")

    base = f"http://{settings.host}:{settings.port}"
    logger.info("Map view:      %s/", base)
    logger.info("Overlay view:  %s/overlay", base)
    logger.info("Admin panel:   %s/admin", base)

    try:
        yield
    finally:
        if container.feed is not None:
            await asyncio.to_thread(container.feed.stop)


app = FastAPI(title="livetrack", lifespan=lifespan)
app.include_router(views_router)
app.include_router(admin_router)

_public_dir = Path(ServerSettings.from_env().public_dir)
if _public_dir.is_dir():
    app.mount("/public", StaticFiles(directory=str(_public_dir)), name="public")


@app.exception_handler(AdminLoginRequired)
async def admin_login_required_handler(
    request: Request, exc: AdminLoginRequired
) -> RedirectResponse:
    response = RedirectResponse(url="/admin/login", status_code=302)
    response.delete_cookie(SESSION_COOKIE)
    return response


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Keep unexpected failures as JSON so the polling views can ignore them."""

    logger.exception("Unhandled exception", extra={"path": str(request.url.path)})

    reveal = (os.getenv("LIVETRACK_REVEAL_ERRORS") or "").strip().lower() in {
        "1",
        "true",
        "yes",
        "on",
    }
    detail = (str(exc) or exc.__class__.__name__) if reveal else "Internal Server Error"
    return JSONResponse(status_code=500, content={"detail": detail})


@app.get("/health", response_model=HealthSchema)
def health(container: ServiceContainer = Depends(get_container)) -> HealthSchema:
    feed = container.feed
    return HealthSchema(
        status="ok", feed_connected=feed is not None and feed.is_connected
    )
