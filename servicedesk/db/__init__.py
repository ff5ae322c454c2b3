"""Database helpers (engine/session export) for the SQL session store."""

from .session import Base, get_engine, get_session

__all__ = ["Base", "get_engine", "get_session"]
