"""Session helpers (session stores, issuing tokens, cookies, lookup)."""
from __future__ import annotations

import logging
import secrets
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional, Protocol

from fastapi import Request, Response
from sqlalchemy import delete

from servicedesk.core.config import get_settings
from servicedesk.db import get_engine, get_session
from servicedesk.db.models import UserSession

SESSION_COOKIE_NAME = "session"

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes even for timezone-aware columns.
    return value.astimezone(timezone.utc) if value.tzinfo else value.replace(tzinfo=timezone.utc)


@dataclass(frozen=True)
class SessionRecord:
    token: str
    username: str
    role: str
    expires_at: datetime
    is_authenticated: bool = True

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    def expired(self, now: Optional[datetime] = None) -> bool:
        return _as_utc(self.expires_at) <= (now or _utcnow())


class SessionStore(Protocol):
    """Mapping of opaque token -> SessionRecord with expiry."""

    def issue(self, username: str, role: str) -> SessionRecord: ...

    def get(self, token: str) -> Optional[SessionRecord]: ...

    def delete(self, token: str) -> None: ...

    def sweep_expired(self) -> int: ...


def _new_record(username: str, role: str) -> SessionRecord:
    ttl = max(60, get_settings().session_ttl_seconds)
    return SessionRecord(
        token=secrets.token_urlsafe(32),
        username=username,
        role=role,
        expires_at=_utcnow() + timedelta(seconds=ttl),
    )


class MemorySessionStore:
    """Process-local session store."""

    def __init__(self) -> None:
        self._records: dict[str, SessionRecord] = {}
        self._lock = threading.Lock()

    def issue(self, username: str, role: str) -> SessionRecord:
        self.sweep_expired()
        record = _new_record(username, role)
        with self._lock:
            self._records[record.token] = record
        return record

    def get(self, token: str) -> Optional[SessionRecord]:
        if not token:
            return None
        with self._lock:
            record = self._records.get(token)
            if record and record.expired():
                del self._records[token]
                return None
            return record

    def delete(self, token: str) -> None:
        if not token:
            return
        with self._lock:
            self._records.pop(token, None)

    def sweep_expired(self) -> int:
        now = _utcnow()
        with self._lock:
            stale = [token for token, record in self._records.items() if record.expired(now)]
            for token in stale:
                del self._records[token]
        return len(stale)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)


class SQLSessionStore:
    """Session store persisted in the ``user_sessions`` table (DATABASE_URL)."""

    def __init__(self) -> None:
        UserSession.metadata.create_all(bind=get_engine(), tables=[UserSession.__table__])

    @staticmethod
    def _to_record(entity: UserSession) -> SessionRecord:
        return SessionRecord(
            token=entity.token,
            username=entity.username,
            role=entity.role,
            expires_at=_as_utc(entity.expires_at),
            is_authenticated=bool(entity.is_authenticated),
        )

    def issue(self, username: str, role: str) -> SessionRecord:
        self.sweep_expired()
        record = _new_record(username, role)
        with get_session() as session:
            session.add(
                UserSession(
                    token=record.token,
                    username=record.username,
                    role=record.role,
                    is_authenticated=record.is_authenticated,
                    expires_at=record.expires_at,
                )
            )
            session.commit()
        return record

    def get(self, token: str) -> Optional[SessionRecord]:
        if not token:
            return None
        with get_session() as session:
            entity = session.get(UserSession, token)
            if not entity:
                return None
            record = self._to_record(entity)
            if record.expired():
                session.delete(entity)
                session.commit()
                return None
            return record

    def delete(self, token: str) -> None:
        if not token:
            return
        with get_session() as session:
            session.execute(delete(UserSession).where(UserSession.token == token))
            session.commit()

    def sweep_expired(self) -> int:
        with get_session() as session:
            result = session.execute(delete(UserSession).where(UserSession.expires_at <= _utcnow()))
            session.commit()
            return result.rowcount or 0


def create_session_store() -> SessionStore:
    """Pick the SQL store when DATABASE_URL is set, otherwise keep sessions in memory."""
    if (get_settings().database_url or "").strip():
        logger.info("Using SQL session store")
        return SQLSessionStore()
    return MemorySessionStore()


def session_store(request: Request) -> SessionStore:
    return request.app.state.session_store


def current_session(request: Request) -> Optional[SessionRecord]:
    """Return the live session behind the request cookie, if any."""
    token = request.cookies.get(SESSION_COOKIE_NAME)
    if not token:
        return None
    return session_store(request).get(token)


def set_session_cookie(response: Response, token: str) -> None:
    settings = get_settings()
    response.set_cookie(
        SESSION_COOKIE_NAME,
        token,
        httponly=True,
        secure=settings.app_env == "prod",
        samesite="lax",
        max_age=settings.session_ttl_seconds,
        path="/",
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(SESSION_COOKIE_NAME, path="/")
