"""Monthly activity report (CRA) model module."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import BigInteger, DateTime, Enum, ForeignKey, Index, Integer, Numeric, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from foresy.models.base import Base, SoftDeleteMixin, TimestampMixin
from foresy.models.enums import CraStatus, RelationRole, enum_values


class Cra(Base, TimestampMixin, SoftDeleteMixin):
    __tablename__ = "cras"
    __table_args__ = (Index("idx_cras_creator_period", "created_by_user_id", "year", "month"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    month: Mapped[int] = mapped_column(Integer, nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    status: Mapped[CraStatus] = mapped_column(
        Enum(CraStatus, name="cra_status", values_callable=enum_values, native_enum=False),
        default=CraStatus.DRAFT,
        nullable=False,
    )
    total_days: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=Decimal("0"), nullable=False)
    total_amount: Mapped[int] = mapped_column(BigInteger, default=0, nullable=False)
    currency: Mapped[str] = mapped_column(String(3), default="EUR", nullable=False)
    created_by_user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="RESTRICT"), nullable=False)
    submitted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    locked_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    cra_missions = relationship("CraMission", back_populates="cra", cascade="all, delete-orphan")
    user_cras = relationship("UserCra", back_populates="cra", cascade="all, delete-orphan")

    @property
    def is_draft(self) -> bool:
        return self.status == CraStatus.DRAFT

    @property
    def period_label(self) -> str:
        return f"{self.year}-{self.month:02d}"


class CraMission(Base, TimestampMixin):
    __tablename__ = "cra_missions"
    __table_args__ = (UniqueConstraint("cra_id", "mission_id", name="uq_cra_missions_cra_mission"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    cra_id: Mapped[int] = mapped_column(ForeignKey("cras.id", ondelete="CASCADE"), nullable=False)
    mission_id: Mapped[int] = mapped_column(ForeignKey("missions.id", ondelete="RESTRICT"), nullable=False, index=True)

    cra = relationship("Cra", back_populates="cra_missions")
    mission = relationship("Mission")


class UserCra(Base, TimestampMixin):
    __tablename__ = "user_cras"
    __table_args__ = (UniqueConstraint("user_id", "cra_id", name="uq_user_cras_user_cra"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    cra_id: Mapped[int] = mapped_column(ForeignKey("cras.id", ondelete="CASCADE"), nullable=False)
    role: Mapped[RelationRole] = mapped_column(
        Enum(RelationRole, name="relation_role", values_callable=enum_values, native_enum=False), nullable=False
    )

    cra = relationship("Cra", back_populates="user_cras")
