"""Security helpers (hashing and verification)."""

from __future__ import annotations

import bcrypt
from argon2 import PasswordHasher, exceptions as argon_exc

_ph = PasswordHasher()
_ARGON2_PREFIX = "$argon2"
# Hashes written by the previous deployment (bcrypt, cost 10).
_LEGACY_PREFIXES = ("$2a$", "$2b$", "$2y$")


def hash_password(password: str) -> str:
    """Create an Argon2 hash using the library's fixed default parameters."""
    return _ph.hash(password)


def _verify_legacy(password: str, stored: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), stored.encode("utf-8"))
    except ValueError:
        return False


def verify_password(password: str, stored_hash: str | None) -> bool:
    stored = stored_hash or ""
    if stored.startswith(_ARGON2_PREFIX):
        try:
            return _ph.verify(stored, password)
        except (argon_exc.VerifyMismatchError, argon_exc.VerificationError, argon_exc.InvalidHashError):
            return False
    if stored.startswith(_LEGACY_PREFIXES):
        return _verify_legacy(password, stored)
    return False


def needs_rehash(stored_hash: str | None) -> bool:
    """True when a verified hash should be replaced by a fresh Argon2 one."""
    stored = stored_hash or ""
    if not stored.startswith(_ARGON2_PREFIX):
        return True
    try:
        return _ph.check_needs_rehash(stored)
    except argon_exc.InvalidHashError:
        return True
