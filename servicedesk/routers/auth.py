from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from servicedesk.core.config import get_settings
from servicedesk.core.rate_limiter import rate_limit_ip
from servicedesk.schemas.bodies import LoginBody, RegisterBody
from servicedesk.services.auth_service import AuthService
from servicedesk.services.session_service import (
    SESSION_COOKIE_NAME,
    clear_session_cookie,
    session_store,
    set_session_cookie,
)

router = APIRouter(prefix="/api", tags=["auth"])


def get_auth_service(request: Request) -> AuthService:
    return AuthService(sessions=session_store(request))


@router.post("/register")
def register(request: Request, body: RegisterBody, auth_service: AuthService = Depends(get_auth_service)):
    settings = get_settings()
    rate_limit_ip(request, "auth:register", limit=settings.register_rate_limit, window_seconds=settings.register_rate_window)
    auth_service.register(body.username or "", body.email or "", body.password or "")
    return {"success": True, "message": "Registration successful."}


@router.post("/login")
def login(request: Request, body: LoginBody, auth_service: AuthService = Depends(get_auth_service)):
    settings = get_settings()
    rate_limit_ip(request, "auth:login", limit=settings.login_rate_limit, window_seconds=settings.login_rate_window)
    outcome = auth_service.login(
        body.username or "",
        body.password or "",
        previous_token=request.cookies.get(SESSION_COOKIE_NAME),
    )
    resp = JSONResponse({"success": True, "isAdmin": outcome.is_admin})
    set_session_cookie(resp, outcome.session_token)
    return resp


@router.post("/logout")
def logout(request: Request, auth_service: AuthService = Depends(get_auth_service)):
    auth_service.logout(request.cookies.get(SESSION_COOKIE_NAME))
    resp = JSONResponse({"success": True})
    clear_session_cookie(resp)
    return resp
