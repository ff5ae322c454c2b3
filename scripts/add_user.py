#!/usr/bin/env python3
"""
Create an account directly in the users document (the HTTP API only creates
plain users, so this is how the first admin gets in).

Usage:
  python scripts/add_user.py --username boss --email boss@example.com [--password secret] [--admin]
"""
from __future__ import annotations

import argparse
import getpass
import sys

from servicedesk.core.errors import ServiceError
from servicedesk.services.auth_service import ROLE_ADMIN, ROLE_USER, AuthService
from servicedesk.services.session_service import MemorySessionStore


def main() -> None:
    ap = argparse.ArgumentParser(description="Create a servicedesk user")
    ap.add_argument("--username", required=True, help="Login name (must be unique)")
    ap.add_argument("--email", default="", help="Contact e-mail")
    ap.add_argument("--password", help="Password (prompted when omitted)")
    ap.add_argument("--admin", action="store_true", help="Grant the admin role")
    args = ap.parse_args()

    username = (args.username or "").strip()
    if not username:
        raise SystemExit("Invalid username")
    password = args.password or getpass.getpass("Password: ")
    role = ROLE_ADMIN if args.admin else ROLE_USER

    svc = AuthService(sessions=MemorySessionStore())
    try:
        svc.register(username, args.email.strip(), password, role=role)
    except ServiceError as exc:
        raise SystemExit(exc.message)
    print("OK: user created")
    print(f"  Username: {username}")
    print(f"  Role: {role}")


if __name__ == "__main__":
    try:
        main()
    except SystemExit:
        raise
    except Exception as exc:  # pragma: no cover - CLI usage
        sys.stderr.write(f"Error: {exc}\n")
        raise SystemExit(1)
