"""
Page routes for the bundled frontend.

Pages are plain HTML files under Settings.frontend_dir; these handlers only
apply the session gate (redirecting to ``/`` on failure) and hand the file
back.
"""
from __future__ import annotations

from typing import Callable, Optional

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import FileResponse, RedirectResponse

from servicedesk.core.config import get_settings
from servicedesk.routers.guards import is_admin, is_authenticated
from servicedesk.services.session_service import SessionRecord, current_session

router = APIRouter(prefix="", tags=["pages"])


def _page(filename: str) -> FileResponse:
    base = get_settings().frontend_dir
    path = base / filename
    if not path.is_file():
        raise HTTPException(404, "Page not found")
    return FileResponse(path, media_type="text/html")


def _gated(request: Request, filename: str, allowed: Callable[[Optional[SessionRecord]], bool]):
    if not allowed(current_session(request)):
        return RedirectResponse("/", status_code=302)
    return _page(filename)


@router.get("/", include_in_schema=False)
def home():
    return _page("index.html")


@router.get("/register.html", include_in_schema=False)
def register_page():
    return _page("register.html")


@router.get("/services.html", include_in_schema=False)
def services_page(request: Request):
    return _gated(request, "services.html", is_authenticated)


@router.get("/admin-panel.html", include_in_schema=False)
def admin_panel_page(request: Request):
    return _gated(request, "admin-panel.html", is_admin)
