"""Activity report entries and their relation tables."""

from __future__ import annotations

import datetime as dt
from decimal import Decimal

from sqlalchemy import BigInteger, Date, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from foresy.models.base import Base, SoftDeleteMixin, TimestampMixin


class CraEntry(Base, TimestampMixin, SoftDeleteMixin):
    __tablename__ = "cra_entries"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
    quantity: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    unit_price: Mapped[int] = mapped_column(BigInteger, nullable=False)
    description: Mapped[str | None] = mapped_column(String(500))

    cra_link = relationship("CraEntryCra", back_populates="entry", uselist=False, cascade="all, delete-orphan")
    mission_link = relationship("CraEntryMission", back_populates="entry", uselist=False, cascade="all, delete-orphan")

    @property
    def cra_id(self) -> int | None:
        return self.cra_link.cra_id if self.cra_link else None

    @property
    def mission_id(self) -> int | None:
        return self.mission_link.mission_id if self.mission_link else None

    @property
    def mission(self):
        return self.mission_link.mission if self.mission_link else None


class CraEntryCra(Base):
    __tablename__ = "cra_entry_cras"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    cra_entry_id: Mapped[int] = mapped_column(ForeignKey("cra_entries.id", ondelete="CASCADE"), nullable=False, unique=True)
    cra_id: Mapped[int] = mapped_column(ForeignKey("cras.id", ondelete="CASCADE"), nullable=False, index=True)

    entry = relationship("CraEntry", back_populates="cra_link")
    cra = relationship("Cra")


class CraEntryMission(Base):
    __tablename__ = "cra_entry_missions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    cra_entry_id: Mapped[int] = mapped_column(ForeignKey("cra_entries.id", ondelete="CASCADE"), nullable=False, unique=True)
    mission_id: Mapped[int] = mapped_column(ForeignKey("missions.id", ondelete="RESTRICT"), nullable=False, index=True)

    entry = relationship("CraEntry", back_populates="mission_link")
    mission = relationship("Mission")
