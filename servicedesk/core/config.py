"""
Configuration helpers for the servicedesk backend.

Settings are read from environment variables once (see get_settings) so that
routers/services never fetch os.environ directly. Tests call
get_settings.cache_clear() after changing the environment.
"""

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
import os


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    data_dir: Path
    users_file: str
    app_data_file: str
    frontend_dir: Path
    session_ttl_seconds: int
    database_url: str
    whatsapp_number: str
    whatsapp_api_url: str
    notifications_enabled: bool
    log_level: str
    log_file: str
    login_rate_limit: int
    login_rate_window: int
    register_rate_limit: int
    register_rate_window: int
    trust_forwarded_for: bool


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _int(value: str, default: int = 0) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    def _bool(value: str | None, default: bool = False) -> bool:
        if value is None:
            return default
        return value.strip().lower() in {"1", "true", "yes", "on"}

    return Settings(
        app_env=(os.getenv("APP_ENV") or "dev").lower(),
        data_dir=Path(os.getenv("DATA_DIR", "data")).resolve(),
        users_file=os.getenv("USERS_FILE", "users.json"),
        app_data_file=os.getenv("APP_DATA_FILE", "data.json"),
        frontend_dir=Path(os.getenv("FRONTEND_DIR", "frontend")).resolve(),
        session_ttl_seconds=_int(os.getenv("SESSION_TTL_SECONDS", "3600"), 3600),
        database_url=os.getenv("DATABASE_URL", ""),
        whatsapp_number=os.getenv("WHATSAPP_NUMBER", ""),
        whatsapp_api_url=os.getenv("WHATSAPP_API_URL", "https://api.whatsapp.com/send?phone="),
        notifications_enabled=_bool(os.getenv("NOTIFICATIONS_ENABLED"), True),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        log_file=os.getenv("LOG_FILE", ""),
        login_rate_limit=_int(os.getenv("LOGIN_RATE_LIMIT", "10"), 10),
        login_rate_window=_int(os.getenv("LOGIN_RATE_WINDOW", "60"), 60),
        register_rate_limit=_int(os.getenv("REGISTER_RATE_LIMIT", "5"), 5),
        register_rate_window=_int(os.getenv("REGISTER_RATE_WINDOW", "300"), 300),
        trust_forwarded_for=_bool(os.getenv("TRUST_FORWARDED_FOR"), False),
    )
