"""Mission model module."""

from __future__ import annotations

from datetime import date

from sqlalchemy import BigInteger, Date, Enum, ForeignKey, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from foresy.models.base import Base, SoftDeleteMixin, TimestampMixin
from foresy.models.enums import CompanyRole, MissionStatus, MissionType, RelationRole, enum_values


class Mission(Base, TimestampMixin, SoftDeleteMixin):
    __tablename__ = "missions"
    __table_args__ = (Index("idx_missions_creator_status", "created_by_user_id", "status"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    mission_type: Mapped[MissionType] = mapped_column(
        Enum(MissionType, name="mission_type", values_callable=enum_values, native_enum=False), nullable=False
    )
    status: Mapped[MissionStatus] = mapped_column(
        Enum(MissionStatus, name="mission_status", values_callable=enum_values, native_enum=False),
        default=MissionStatus.LEAD,
        nullable=False,
    )
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date | None] = mapped_column(Date)
    # Amounts are integer cents.
    daily_rate: Mapped[int | None] = mapped_column(BigInteger)
    fixed_price: Mapped[int | None] = mapped_column(BigInteger)
    currency: Mapped[str] = mapped_column(String(3), default="EUR", nullable=False)
    created_by_user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="RESTRICT"), nullable=False)

    mission_companies = relationship("MissionCompany", back_populates="mission", cascade="all, delete-orphan")
    user_missions = relationship("UserMission", back_populates="mission", cascade="all, delete-orphan")

    def company_id_for(self, role: CompanyRole) -> int | None:
        for link in self.mission_companies:
            if link.role == role:
                return link.company_id
        return None


class MissionCompany(Base, TimestampMixin):
    __tablename__ = "mission_companies"
    __table_args__ = (UniqueConstraint("mission_id", "role", name="uq_mission_companies_mission_role"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    mission_id: Mapped[int] = mapped_column(ForeignKey("missions.id", ondelete="CASCADE"), nullable=False)
    company_id: Mapped[int] = mapped_column(ForeignKey("companies.id", ondelete="RESTRICT"), nullable=False, index=True)
    role: Mapped[CompanyRole] = mapped_column(
        Enum(CompanyRole, name="company_role", values_callable=enum_values, native_enum=False), nullable=False
    )

    mission = relationship("Mission", back_populates="mission_companies")
    company = relationship("Company")


class UserMission(Base, TimestampMixin):
    __tablename__ = "user_missions"
    __table_args__ = (UniqueConstraint("user_id", "mission_id", name="uq_user_missions_user_mission"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    mission_id: Mapped[int] = mapped_column(ForeignKey("missions.id", ondelete="CASCADE"), nullable=False)
    role: Mapped[RelationRole] = mapped_column(
        Enum(RelationRole, name="relation_role", values_callable=enum_values, native_enum=False), nullable=False
    )

    mission = relationship("Mission", back_populates="user_missions")
