"""Application factory for the servicedesk API."""
from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from servicedesk.core.config import get_settings
from servicedesk.core.errors import ServiceError
from servicedesk.core.logging_config import setup_logging
from servicedesk.routers import admin as admin_router
from servicedesk.routers import auth as auth_router
from servicedesk.routers import catalog as catalog_router
from servicedesk.routers import pages as pages_router
from servicedesk.services.session_service import SessionStore, create_session_store

logger = logging.getLogger(__name__)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Inject baseline security headers (anti clickjacking, nosniff, referrer policy)."""

    def __init__(self, app, *, enforce_hsts: bool) -> None:
        super().__init__(app)
        self._enforce_hsts = enforce_hsts

    async def dispatch(self, request, call_next):
        response = await call_next(request)
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Referrer-Policy", "no-referrer-when-downgrade")
        if self._enforce_hsts:
            response.headers.setdefault("Strict-Transport-Security", "max-age=31536000; includeSubDomains")
        return response


def _error_body(message: str) -> dict:
    return {"success": False, "message": message}


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(_error_body(exc.message), status_code=exc.status_code)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(_error_body("Invalid request body."), status_code=400)


def create_app(session_store: SessionStore | None = None) -> FastAPI:
    """Build the app; compatible with ``uvicorn --factory servicedesk.app:create_app``."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_file or None)

    app = FastAPI(title="Service Desk API")
    app.state.session_store = session_store or create_session_store()

    app.add_middleware(SecurityHeadersMiddleware, enforce_hsts=settings.app_env == "prod")
    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)

    app.include_router(auth_router.router)
    app.include_router(catalog_router.router)
    app.include_router(admin_router.router)
    app.include_router(pages_router.router)

    settings.data_dir.mkdir(parents=True, exist_ok=True)
    logger.info("Data directory: %s (env=%s)", settings.data_dir, settings.app_env)
    return app
