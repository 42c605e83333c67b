"""Entries of a CRA; every write recalculates the parent totals."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any

from sqlalchemy import select

from foresy.core.exceptions import ConflictError, ContractViolation, DomainValidationError, NotFoundError
from foresy.core.pagination import paginate
from foresy.core.result import ServiceResult
from foresy.core.validators import is_blank, parse_date, parse_decimal, parse_int, require, validate_length
from foresy.models import Cra, CraEntry, CraEntryCra, CraEntryMission, CraMission, Mission, User
from foresy.models.base import utcnow
from foresy.services.base_service import BaseService
from foresy.services.cra_service import active_entries_stmt, line_total, load_cra, recalculate_totals
from foresy.services.mission_service import accessible_missions_clause

MAX_DESCRIPTION_LENGTH = 500
MAX_QUANTITY = Decimal("365")
# 1,000,000 EUR in cents.
MAX_UNIT_PRICE = 100_000_000


def serialize_entry(entry: CraEntry) -> dict:
    return {
        "id": entry.id,
        "cra_id": entry.cra_id,
        "mission_id": entry.mission_id,
        "date": entry.date,
        "quantity": float(entry.quantity),
        "unit_price": entry.unit_price,
        "line_total": line_total(entry.quantity, entry.unit_price),
        "description": entry.description,
        "created_at": entry.created_at,
        "updated_at": entry.updated_at,
    }


def validate_entry_date(value: Any) -> date:
    entry_date = parse_date(value, "date")
    if entry_date > utcnow().date():
        raise DomainValidationError("date cannot be in the future", code="future_date", field="date")
    return entry_date


def validate_quantity(value: Any) -> Decimal:
    quantity = parse_decimal(require(value, "quantity"), "quantity")
    if quantity <= 0:
        raise DomainValidationError("quantity must be greater than 0", code="invalid_quantity", field="quantity")
    if quantity > MAX_QUANTITY:
        raise DomainValidationError(f"quantity cannot exceed {MAX_QUANTITY} days", code="invalid_quantity", field="quantity")
    if quantity != quantity.quantize(Decimal("0.01")):
        raise DomainValidationError("quantity allows at most two decimals", code="invalid_quantity", field="quantity")
    return quantity.quantize(Decimal("0.01"))


def validate_unit_price(value: Any) -> int:
    unit_price = parse_int(require(value, "unit_price"), "unit_price")
    if unit_price <= 0:
        raise DomainValidationError("unit_price must be greater than 0", code="invalid_unit_price", field="unit_price")
    if unit_price > MAX_UNIT_PRICE:
        raise DomainValidationError("unit_price cannot exceed 1000000 EUR", code="invalid_unit_price", field="unit_price")
    return unit_price


class CraEntryService(BaseService):
    def _writable_cra(self, user: User, cra_id: int | None) -> Cra:
        if cra_id is None:
            raise ContractViolation("CRA is required", code="missing_parameter", field="cra_id")
        cra = load_cra(self.db, user, cra_id, for_write=True)
        if not cra.is_draft:
            raise ConflictError(f"CRA is {cra.status.value}; entries cannot be modified", code="invalid_cra_state")
        return cra

    def _load_entry(self, cra: Cra, entry_id: int) -> CraEntry:
        entry = self.db.scalar(active_entries_stmt(cra.id).where(CraEntry.id == entry_id))
        if entry is None:
            raise NotFoundError("Entry not found", code="entry_not_found")
        return entry

    def _mission(self, user: User, mission_id: Any) -> Mission:
        mission = self.db.scalar(
            select(Mission).where(
                Mission.id == parse_int(mission_id, "mission_id"),
                Mission.deleted_at.is_(None),
                accessible_missions_clause(self.db, user.id),
            )
        )
        if mission is None:
            raise NotFoundError("Mission not found", code="mission_not_found", field="mission_id")
        return mission

    def _assert_unique(self, cra: Cra, mission: Mission | None, entry_date: date, exclude_id: int | None = None) -> None:
        if mission is None:
            return
        stmt = (
            active_entries_stmt(cra.id)
            .join(CraEntryMission, CraEntryMission.cra_entry_id == CraEntry.id)
            .where(CraEntryMission.mission_id == mission.id, CraEntry.date == entry_date)
        )
        if exclude_id is not None:
            stmt = stmt.where(CraEntry.id != exclude_id)
        if self.db.scalar(stmt.limit(1)) is not None:
            raise ConflictError("An entry already exists for this mission and date", code="duplicate_entry")

    def _link_mission(self, cra: Cra, mission: Mission) -> None:
        linked = self.db.scalar(select(CraMission.id).where(CraMission.cra_id == cra.id, CraMission.mission_id == mission.id))
        if linked is None:
            self.db.add(CraMission(cra_id=cra.id, mission_id=mission.id))

    def create(self, user: User, cra_id: int | None, attributes: dict | None) -> ServiceResult:
        def action() -> ServiceResult:
            if not attributes:
                raise ContractViolation("Entry payload is required", code="missing_parameter")
            cra = self._writable_cra(user, cra_id)
            entry_date = validate_entry_date(attributes.get("date"))
            quantity = validate_quantity(attributes.get("quantity"))
            unit_price = validate_unit_price(attributes.get("unit_price"))
            description = attributes.get("description")
            validate_length(description, "description", maximum=MAX_DESCRIPTION_LENGTH)
            mission = None
            if not is_blank(attributes.get("mission_id")):
                mission = self._mission(user, attributes["mission_id"])
            self._assert_unique(cra, mission, entry_date)

            entry = CraEntry(date=entry_date, quantity=quantity, unit_price=unit_price, description=description)
            entry.cra_link = CraEntryCra(cra_id=cra.id)
            if mission is not None:
                entry.mission_link = CraEntryMission(mission_id=mission.id)
                self._link_mission(cra, mission)
            self.db.add(entry)
            recalculate_totals(self.db, cra)
            self.commit()

            self.logger.info(
                "cra_entry.created",
                extra={"event": "cra_entry.created", "cra_id": cra.id, "entry_id": entry.id},
            )
            self.metrics.increment("cra_entry.created")
            return ServiceResult.created(entry=serialize_entry(entry), cra_totals=self._totals(cra))

        return self.run("cra_entry.create", action)

    def update(self, user: User, cra_id: int | None, entry_id: int, attributes: dict | None) -> ServiceResult:
        def action() -> ServiceResult:
            if not attributes:
                raise ContractViolation("Entry payload is required", code="missing_parameter")
            cra = self._writable_cra(user, cra_id)
            entry = self._load_entry(cra, entry_id)

            entry_date = validate_entry_date(attributes["date"]) if "date" in attributes else entry.date
            quantity = validate_quantity(attributes["quantity"]) if "quantity" in attributes else entry.quantity
            unit_price = validate_unit_price(attributes["unit_price"]) if "unit_price" in attributes else entry.unit_price
            if "description" in attributes:
                validate_length(attributes["description"], "description", maximum=MAX_DESCRIPTION_LENGTH)

            mission = entry.mission
            mission_changed = False
            if "mission_id" in attributes:
                mission = None if is_blank(attributes["mission_id"]) else self._mission(user, attributes["mission_id"])
                mission_changed = (mission.id if mission is not None else None) != entry.mission_id
            if mission_changed or entry_date != entry.date:
                self._assert_unique(cra, mission, entry_date, exclude_id=entry.id)

            entry.date = entry_date
            entry.quantity = quantity
            entry.unit_price = unit_price
            if "description" in attributes:
                entry.description = attributes["description"]
            if mission_changed:
                if mission is None:
                    entry.mission_link = None
                elif entry.mission_link is None:
                    entry.mission_link = CraEntryMission(mission_id=mission.id)
                else:
                    entry.mission_link.mission_id = mission.id
                if mission is not None:
                    self._link_mission(cra, mission)
            recalculate_totals(self.db, cra)
            self.commit()

            self.logger.info(
                "cra_entry.updated",
                extra={"event": "cra_entry.updated", "cra_id": cra.id, "entry_id": entry.id},
            )
            return ServiceResult.ok(entry=serialize_entry(entry), cra_totals=self._totals(cra))

        return self.run("cra_entry.update", action)

    def destroy(self, user: User, cra_id: int | None, entry_id: int) -> ServiceResult:
        def action() -> ServiceResult:
            cra = self._writable_cra(user, cra_id)
            entry = self._load_entry(cra, entry_id)
            entry.deleted_at = utcnow()
            recalculate_totals(self.db, cra)
            self.commit()
            self.logger.info(
                "cra_entry.deleted",
                extra={"event": "cra_entry.deleted", "cra_id": cra.id, "entry_id": entry.id},
            )
            self.metrics.increment("cra_entry.deleted")
            return ServiceResult.ok(message="Entry deleted successfully", cra_totals=self._totals(cra))

        return self.run("cra_entry.destroy", action)

    def get(self, user: User, cra_id: int, entry_id: int) -> ServiceResult:
        def action() -> ServiceResult:
            cra = load_cra(self.db, user, cra_id)
            return ServiceResult.ok(entry=serialize_entry(self._load_entry(cra, entry_id)))

        return self.run("cra_entry.get", action)

    def list(self, user: User, cra_id: int, page: Any = None, per_page: Any = None) -> ServiceResult:
        def action() -> ServiceResult:
            cra = load_cra(self.db, user, cra_id)
            stmt = active_entries_stmt(cra.id).order_by(CraEntry.date, CraEntry.id)
            result_page = paginate(self.db, stmt, page=page, per_page=per_page)
            return ServiceResult.ok(
                meta=result_page.meta(),
                entries=[serialize_entry(entry) for entry in result_page.items],
                cra_totals=self._totals(cra),
            )

        return self.run("cra_entry.list", action)

    @staticmethod
    def _totals(cra: Cra) -> dict:
        return {"total_days": float(cra.total_days or 0), "total_amount": int(cra.total_amount or 0)}
