"""Company and user/company relation models."""

from __future__ import annotations

from sqlalchemy import Enum, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from foresy.models.base import Base, SoftDeleteMixin, TimestampMixin
from foresy.models.enums import CompanyRole, enum_values


class Company(Base, TimestampMixin, SoftDeleteMixin):
    __tablename__ = "companies"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    siret: Mapped[str] = mapped_column(String(14), nullable=False, unique=True)
    siren: Mapped[str | None] = mapped_column(String(9))
    country: Mapped[str] = mapped_column(String(2), default="FR", nullable=False)
    currency: Mapped[str] = mapped_column(String(3), default="EUR", nullable=False)

    user_companies = relationship("UserCompany", back_populates="company", cascade="all, delete-orphan")


class UserCompany(Base, TimestampMixin):
    __tablename__ = "user_companies"
    __table_args__ = (UniqueConstraint("user_id", "company_id", name="uq_user_companies_user_company"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    company_id: Mapped[int] = mapped_column(ForeignKey("companies.id", ondelete="CASCADE"), nullable=False, index=True)
    role: Mapped[CompanyRole] = mapped_column(
        Enum(CompanyRole, name="company_role", values_callable=enum_values, native_enum=False), nullable=False
    )

    user = relationship("User", back_populates="user_companies")
    company = relationship("Company", back_populates="user_companies")
