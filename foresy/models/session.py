"""Server-side login session model."""

from __future__ import annotations

import secrets
from datetime import datetime, timedelta

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from foresy.models.base import Base, as_utc, utcnow


def generate_session_token() -> str:
    return secrets.token_urlsafe(32)


class UserSession(Base):
    __tablename__ = "sessions"
    __table_args__ = (Index("idx_sessions_user_expires", "user_id", "expires_at"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    token: Mapped[str] = mapped_column(String(128), nullable=False, unique=True, default=generate_session_token)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    last_activity_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    ip_address: Mapped[str | None] = mapped_column(String(64))
    user_agent: Mapped[str | None] = mapped_column(String(512))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)

    user = relationship("User", back_populates="sessions")

    @property
    def is_active(self) -> bool:
        return as_utc(self.expires_at) > utcnow()

    def refresh(self, ttl: timedelta) -> None:
        """Record activity and slide the expiry window forward."""
        now = utcnow()
        self.last_activity_at = now
        self.expires_at = now + ttl

    def expire(self) -> None:
        self.expires_at = utcnow()
