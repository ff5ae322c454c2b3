from __future__ import annotations

import sys
from pathlib import Path

import bcrypt
import pytest

# Make the package importable when running the tests from a checkout
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from servicedesk.core import config as core_config  # noqa: E402
from servicedesk.core.errors import BadRequestError, ConflictError, StorageUnavailableError, UnauthorizedError  # noqa: E402
from servicedesk.repositories import json_storage  # noqa: E402
from servicedesk.services.auth_service import INVALID_CREDENTIALS, AuthService  # noqa: E402
from servicedesk.services.session_service import MemorySessionStore  # noqa: E402


@pytest.fixture()
def svc(tmp_path, monkeypatch):
    monkeypatch.setenv("DATA_DIR", str(tmp_path))
    monkeypatch.delenv("DATABASE_URL", raising=False)
    core_config.get_settings.cache_clear()
    yield AuthService(sessions=MemorySessionStore())
    core_config.get_settings.cache_clear()


def _users() -> list:
    return json_storage.load("users.json").get("users", [])


def test_register_appends_plain_user_with_hashed_password(svc):
    user = svc.register("alice", "alice@example.com", "pw")
    assert user["role"] == "user"
    stored = _users()
    assert len(stored) == 1
    assert stored[0]["username"] == "alice"
    assert stored[0]["email"] == "alice@example.com"
    assert stored[0]["password"] != "pw"


def test_duplicate_username_conflicts_without_changes(svc):
    svc.register("alice", "alice@example.com", "pw")
    before = _users()
    with pytest.raises(ConflictError):
        svc.register("alice", "other@example.com", "pw2")
    assert _users() == before


def test_usernames_are_case_sensitive(svc):
    svc.register("alice", "a@example.com", "pw")
    svc.register("Alice", "b@example.com", "pw")
    assert [u["username"] for u in _users()] == ["alice", "Alice"]


def test_register_requires_username_and_password(svc):
    with pytest.raises(BadRequestError):
        svc.register("", "a@example.com", "pw")
    with pytest.raises(BadRequestError):
        svc.register("bob", "a@example.com", "")
    assert _users() == []


def test_login_issues_session_with_stored_role(svc):
    svc.register("root", "root@example.com", "pw", role="admin")
    outcome = svc.login("root", "pw")
    assert outcome.is_admin is True
    record = svc.sessions.get(outcome.session_token)
    assert record is not None
    assert record.is_authenticated is True
    assert record.username == "root"
    assert record.role == "admin"


def test_login_failures_share_one_message(svc):
    svc.register("alice", "alice@example.com", "pw")
    with pytest.raises(UnauthorizedError) as wrong_pw:
        svc.login("alice", "nope")
    with pytest.raises(UnauthorizedError) as unknown:
        svc.login("mallory", "pw")
    assert wrong_pw.value.message == unknown.value.message == INVALID_CREDENTIALS


def test_login_upgrades_legacy_bcrypt_hash(svc):
    legacy = bcrypt.hashpw(b"pw", bcrypt.gensalt(rounds=4)).decode()
    json_storage.save("users.json", {"users": [{"username": "old", "email": "", "password": legacy, "role": "user"}]})
    outcome = svc.login("old", "pw")
    assert outcome.is_admin is False
    upgraded = _users()[0]["password"]
    assert upgraded.startswith("$argon2")
    assert svc.login("old", "pw").username == "old"


def test_logout_drops_session(svc):
    svc.register("alice", "alice@example.com", "pw")
    outcome = svc.login("alice", "pw")
    svc.logout(outcome.session_token)
    assert svc.sessions.get(outcome.session_token) is None
    svc.logout(None)


def test_login_revokes_previous_session_first(svc):
    svc.register("alice", "alice@example.com", "pw")
    first = svc.login("alice", "pw")
    second = svc.login("alice", "pw", previous_token=first.session_token)
    assert svc.sessions.get(first.session_token) is None
    assert svc.sessions.get(second.session_token) is not None


def test_failed_revoke_does_not_leave_new_session(svc):
    class BrokenDeleteStore(MemorySessionStore):
        def delete(self, token):
            raise RuntimeError("session table locked")

    svc.register("alice", "alice@example.com", "pw")
    svc.sessions = BrokenDeleteStore()
    with pytest.raises(RuntimeError):
        svc.login("alice", "pw", previous_token="stale-token")
    assert len(svc.sessions) == 0


def test_failed_hash_upgrade_still_logs_in(svc, monkeypatch):
    legacy = bcrypt.hashpw(b"pw", bcrypt.gensalt(rounds=4)).decode()
    json_storage.save("users.json", {"users": [{"username": "old", "email": "", "password": legacy, "role": "user"}]})

    def read_only(name):
        raise StorageUnavailableError("Storage is temporarily unavailable.")

    monkeypatch.setattr(json_storage, "update", read_only)
    outcome = svc.login("old", "pw")
    assert outcome.username == "old"
    assert _users()[0]["password"] == legacy
