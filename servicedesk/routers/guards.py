"""
Session gate for API routes.

Three tiers: public routes take no dependency, ``require_user`` needs an
authenticated session (401) and ``require_admin`` needs the admin role
(403, anonymous callers included). Page routes use the ``*_allowed``
predicates and redirect instead.
"""
from __future__ import annotations

from typing import Optional

from fastapi import Request

from servicedesk.core.errors import ForbiddenError, UnauthorizedError
from servicedesk.services.session_service import SessionRecord, current_session


def is_authenticated(record: Optional[SessionRecord]) -> bool:
    return bool(record and record.is_authenticated)


def is_admin(record: Optional[SessionRecord]) -> bool:
    return bool(record and record.is_authenticated and record.is_admin)


def optional_session(request: Request) -> Optional[SessionRecord]:
    return current_session(request)


def require_user(request: Request) -> SessionRecord:
    record = current_session(request)
    if not is_authenticated(record):
        raise UnauthorizedError("Authentication required.")
    return record


def require_admin(request: Request) -> SessionRecord:
    record = current_session(request)
    if not is_admin(record):
        raise ForbiddenError("Forbidden")
    return record
