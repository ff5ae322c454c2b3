from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Make the package importable when running the tests from a checkout
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from servicedesk.core.errors import TooManyRequestsError  # noqa: E402
from servicedesk.core.rate_limiter import WindowLimiter  # noqa: E402


def test_limit_applies_within_window():
    limiter = WindowLimiter()
    limiter.hit("auth:login:1.2.3.4", 2, 60, now=100.0)
    limiter.hit("auth:login:1.2.3.4", 2, 60, now=101.0)
    with pytest.raises(TooManyRequestsError):
        limiter.hit("auth:login:1.2.3.4", 2, 60, now=102.0)
    limiter.hit("auth:login:5.6.7.8", 2, 60, now=102.0)


def test_window_restarts_after_expiry():
    limiter = WindowLimiter()
    limiter.hit("k", 1, 60, now=100.0)
    with pytest.raises(TooManyRequestsError):
        limiter.hit("k", 1, 60, now=110.0)
    limiter.hit("k", 1, 60, now=161.0)


def test_expired_windows_are_pruned():
    limiter = WindowLimiter()
    for i in range(50):
        limiter.hit(f"auth:register:10.0.0.{i}", 5, 300, now=1000.0)
    assert limiter.tracked() == 50
    limiter.hit("auth:register:10.0.1.1", 5, 300, now=1301.0)
    assert limiter.tracked() == 1


def test_zero_limit_disables_checks():
    limiter = WindowLimiter()
    for _ in range(10):
        limiter.hit("k", 0, 60)
    assert limiter.tracked() == 0
