"""
Registration and login use cases over the Users document.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from servicedesk.core.config import get_settings
from servicedesk.core.errors import BadRequestError, ConflictError, StorageUnavailableError, UnauthorizedError
from servicedesk.core.security import hash_password, needs_rehash, verify_password
from servicedesk.repositories import json_storage
from servicedesk.services.session_service import SessionStore

logger = logging.getLogger(__name__)

ROLE_USER = "user"
ROLE_ADMIN = "admin"
ROLES = (ROLE_USER, ROLE_ADMIN)

INVALID_CREDENTIALS = "Invalid username or password."


@dataclass
class LoginSuccess:
    username: str
    role: str
    session_token: str

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN


@dataclass
class AuthService:
    """Handles registration, login and logout."""

    sessions: SessionStore

    def __post_init__(self):
        self.settings = get_settings()

    @property
    def users_document(self) -> str:
        return self.settings.users_file

    # -------------------------------------- helpers --------------------------------------
    @staticmethod
    def _find(users: list, username: str) -> Optional[dict]:
        for user in users:
            if user.get("username") == username:
                return user
        return None

    def get_user(self, username: str) -> Optional[dict]:
        users = json_storage.load(self.users_document).get("users") or []
        return self._find(users, username)

    # -------------------------------------- registration --------------------------------------
    def register(self, username: str, email: str, password: str, *, role: str = ROLE_USER) -> dict:
        if not username or not password:
            raise BadRequestError("Username and password are required.")
        if role not in ROLES:
            raise BadRequestError(f"Unknown role: {role}")
        with json_storage.update(self.users_document) as document:
            users = json_storage.collection(document, "users")
            if self._find(users, username):
                # the lock is released without saving: nothing changes
                raise ConflictError("Username already exists.")
            user = {
                "username": username,
                "email": email,
                "password": hash_password(password),
                "role": role,
            }
            users.append(user)
        logger.info("Registered user %s (role=%s)", username, role)
        return user

    # -------------------------------------- login --------------------------------------
    def login(self, username: str, password: str, previous_token: Optional[str] = None) -> LoginSuccess:
        """Verify credentials and issue a fresh session.

        ``previous_token`` (the cookie the browser still carries) is revoked
        before the new session exists, so a failing revoke never leaves an
        orphaned session behind.
        """
        user = self.get_user(username or "")
        if not user or not verify_password(password or "", user.get("password")):
            logger.info("Failed login for %r", username)
            raise UnauthorizedError(INVALID_CREDENTIALS)
        if needs_rehash(user.get("password")):
            self._upgrade_hash(user["username"], password)
        self.logout(previous_token)
        role = user.get("role") or ROLE_USER
        record = self.sessions.issue(user["username"], role)
        return LoginSuccess(username=record.username, role=record.role, session_token=record.token)

    def _upgrade_hash(self, username: str, password: str) -> None:
        new_hash = hash_password(password)
        try:
            with json_storage.update(self.users_document) as document:
                user = self._find(json_storage.collection(document, "users"), username)
                if user:
                    user["password"] = new_hash
        except StorageUnavailableError:
            # the old hash still verifies; retried on the next login
            logger.warning("Could not upgrade password hash for %s", username)
            return
        logger.info("Upgraded password hash for %s", username)

    def logout(self, session_token: Optional[str]) -> None:
        if not session_token:
            return
        self.sessions.delete(session_token)
