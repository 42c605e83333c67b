"""User model module."""

from __future__ import annotations

from sqlalchemy import Boolean, Enum, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from foresy.models.base import Base, TimestampMixin
from foresy.models.enums import OAuthProvider, enum_values


class User(Base, TimestampMixin):
    __tablename__ = "users"
    __table_args__ = (UniqueConstraint("provider", "uid", name="uq_users_provider_uid"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    email: Mapped[str] = mapped_column(String(320), nullable=False, unique=True, index=True)
    password_hash: Mapped[str | None] = mapped_column(String(255))
    provider: Mapped[OAuthProvider | None] = mapped_column(
        Enum(OAuthProvider, name="oauth_provider", values_callable=enum_values, native_enum=False)
    )
    uid: Mapped[str | None] = mapped_column(String(255))
    name: Mapped[str | None] = mapped_column(String(255))
    active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    sessions = relationship("UserSession", back_populates="user", cascade="all, delete-orphan")
    user_companies = relationship("UserCompany", back_populates="user", cascade="all, delete-orphan")

    @property
    def is_oauth(self) -> bool:
        return self.provider is not None and bool(self.uid)
