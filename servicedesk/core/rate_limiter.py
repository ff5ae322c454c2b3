"""
Fixed-window request limits keyed by scope and client address.

Counters live in process memory. Windows that have run out are pruned on
every check, so the table only holds clients seen within the last window.
"""
from __future__ import annotations

import threading
import time
from typing import Dict, Tuple

from fastapi import Request

from servicedesk.core.config import get_settings
from servicedesk.core.errors import TooManyRequestsError


class WindowLimiter:
    def __init__(self) -> None:
        # key -> (hits in window, window end)
        self._windows: Dict[str, Tuple[int, float]] = {}
        self._lock = threading.Lock()

    def _prune(self, now: float) -> None:
        stale = [key for key, (_, ends) in self._windows.items() if ends <= now]
        for key in stale:
            del self._windows[key]

    def hit(self, key: str, limit: int, window_seconds: int, now: float | None = None) -> None:
        if limit <= 0:
            return
        now = time.time() if now is None else now
        with self._lock:
            self._prune(now)
            hits, ends = self._windows.get(key, (0, now + window_seconds))
            hits += 1
            self._windows[key] = (hits, ends)
        if hits > limit:
            raise TooManyRequestsError("Too many requests. Please try again shortly.")

    def tracked(self) -> int:
        with self._lock:
            return len(self._windows)

    def reset(self) -> None:
        with self._lock:
            self._windows.clear()


limiter = WindowLimiter()


def client_address(request: Request) -> str:
    """Peer address; X-Forwarded-For only counts behind a trusted proxy."""
    if get_settings().trust_forwarded_for:
        forwarded = request.headers.get("x-forwarded-for")
        if forwarded:
            return forwarded.split(",")[0].strip()
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


def rate_limit_ip(request: Request, scope: str, *, limit: int, window_seconds: int) -> None:
    limiter.hit(f"{scope}:{client_address(request)}", limit, window_seconds)


def reset_limits() -> None:
    """Forget every counter (used by tests and after config reloads)."""
    limiter.reset()
