"""SQLAlchemy models for server-side login sessions."""
from __future__ import annotations

from sqlalchemy import Boolean, Column, DateTime, String, func

from .session import Base


class UserSession(Base):
    __tablename__ = "user_sessions"

    token = Column(String(128), primary_key=True)
    username = Column(String(255), nullable=False, index=True)
    role = Column(String(32), nullable=False, default="user")
    is_authenticated = Column(Boolean, nullable=False, default=True)
    expires_at = Column(DateTime(timezone=True), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
