from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Form, HTTPException, Request
from fastapi.responses import HTMLResponse, RedirectResponse, Response
from pydantic import ValidationError

from livetrack.adapters.api.dependencies import (
    SESSION_COOKIE,
    get_access_gate,
    get_config_store,
    get_settings,
    require_admin_session,
)
from livetrack.adapters.api.rendering import templates
from livetrack.adapters.api.schemas.config import RuntimeConfigSchema
from livetrack.adapters.settings import ServerSettings
from livetrack.app.services.access_gate import AccessGate
from livetrack.app.services.config_store import ConfigStore
from livetrack.domain.models import AdminSession

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])

ADMIN_NOT_CONFIGURED = (
    "Admin authentication not configured. "
    "Set ADMIN_USERNAME and ADMIN_PASSWORD environment variables."
)


def _ensure_configured(gate: AccessGate) -> None:
    if not gate.configured:
        raise HTTPException(status_code=500, detail=ADMIN_NOT_CONFIGURED)


@router.get("/login", response_class=HTMLResponse)
def login_form(
    request: Request,
    gate: AccessGate = Depends(get_access_gate),
) -> Response:
    _ensure_configured(gate)
    if gate.authenticate(request.cookies.get(SESSION_COOKIE)) is not None:
        return RedirectResponse("/admin", status_code=302)
    return templates.TemplateResponse(request, "login.html", {"error": None})


@router.post("/login")
def login(
    request: Request,
    username: str = Form(default=""),
    password: str = Form(default=""),
    gate: AccessGate = Depends(get_access_gate),
    settings: ServerSettings = Depends(get_settings),
) -> Response:
    _ensure_configured(gate)

    session = gate.login(username, password)
    if session is None:
        return templates.TemplateResponse(
            request,
            "login.html",
            {"error": "Invalid username or password"},
            status_code=401,
        )

    response = RedirectResponse("/admin", status_code=302)
    response.set_cookie(
        SESSION_COOKIE,
        session.session_id,
        max_age=int(gate.ttl.total_seconds()),
        path="/",
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="strict",
    )
    return response


@router.get("/logout")
def logout(
    request: Request,
    gate: AccessGate = Depends(get_access_gate),
) -> Response:
    gate.logout(request.cookies.get(SESSION_COOKIE))
    response = RedirectResponse("/admin/login", status_code=302)
    response.delete_cookie(SESSION_COOKIE, path="/")
    return response


@router.get("", response_class=HTMLResponse)
def admin_panel(
    request: Request,
    session: AdminSession = Depends(require_admin_session),
) -> Response:
    return templates.TemplateResponse(
        request, "admin.html", {"username": session.username}
    )


@router.post("/config", response_model=RuntimeConfigSchema)
async def replace_config(
    request: Request,
    session: AdminSession = Depends(require_admin_session),
    store: ConfigStore = Depends(get_config_store),
) -> RuntimeConfigSchema:
    body = await request.body()
    try:
        submitted = RuntimeConfigSchema.model_validate_json(body)
    except ValidationError:
        raise HTTPException(status_code=400, detail="Invalid JSON")

    logger.info("Config replaced by %s", session.username)
    return RuntimeConfigSchema.from_domain(store.replace(submitted.to_domain()))
