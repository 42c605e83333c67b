"""Monthly activity report (CRA) lifecycle, listing and totals."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from sqlalchemy import func, select

from foresy.core.exceptions import ConflictError, ContractViolation, DomainValidationError, NotFoundError, PermissionDenied
from foresy.core.pagination import paginate
from foresy.core.result import ServiceResult
from foresy.core.state_machine import CRA_STATE_MACHINE
from foresy.core.validators import is_blank, parse_int, require, validate_currency, validate_enum, validate_length
from foresy.models import Cra, CraEntry, CraEntryCra, User, UserCra
from foresy.models.base import utcnow
from foresy.models.enums import CompanyRole, CraStatus, RelationRole
from foresy.services.base_service import BaseService
from foresy.services.company_service import user_has_role

MIN_YEAR = 2000
YEARS_AHEAD = 5
MAX_DESCRIPTION_LENGTH = 2000
TWO_PLACES = Decimal("0.01")


def line_total(quantity: Decimal, unit_price: int) -> int:
    """Amount in cents for one entry, rounded half-up to a whole cent."""
    return int((Decimal(quantity) * Decimal(unit_price)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def serialize_cra(cra: Cra) -> dict:
    return {
        "id": cra.id,
        "month": cra.month,
        "year": cra.year,
        "description": cra.description,
        "status": cra.status.value,
        "total_days": float(cra.total_days or 0),
        "total_amount": int(cra.total_amount or 0),
        "currency": cra.currency,
        "created_by_user_id": cra.created_by_user_id,
        "submitted_at": cra.submitted_at,
        "locked_at": cra.locked_at,
        "created_at": cra.created_at,
        "updated_at": cra.updated_at,
    }


def active_entries_stmt(cra_id: int):
    return (
        select(CraEntry)
        .join(CraEntryCra, CraEntryCra.cra_entry_id == CraEntry.id)
        .where(CraEntryCra.cra_id == cra_id, CraEntry.deleted_at.is_(None))
    )


def load_cra(db, user: User, cra_id: int, for_write: bool = False) -> Cra:
    """Fetch a non-deleted CRA.

    Other users get a 404 on reads and a 403 on writes.
    """
    cra = db.scalar(select(Cra).where(Cra.id == cra_id, Cra.deleted_at.is_(None)))
    if cra is None:
        raise NotFoundError("CRA not found", code="cra_not_found")
    if cra.created_by_user_id != user.id:
        if not for_write:
            raise NotFoundError("CRA not found", code="cra_not_found")
        raise PermissionDenied("Only the CRA creator can access it", code="not_cra_creator")
    return cra


def sum_entries(entries) -> tuple[Decimal, int]:
    """Return (total_days, total_amount in cents) for the given entries."""
    total_days = Decimal("0")
    total_amount = 0
    for entry in entries:
        quantity = Decimal(entry.quantity)
        total_days += quantity
        total_amount += line_total(quantity, entry.unit_price)
    return total_days.quantize(TWO_PLACES), total_amount


def recalculate_totals(db, cra: Cra) -> Cra:
    """Recompute total_days and total_amount from the non-deleted entries.

    Runs inside the caller's transaction; the caller commits.
    """
    db.flush()
    cra.total_days, cra.total_amount = sum_entries(db.scalars(active_entries_stmt(cra.id)))
    return cra


def parse_filter_int(value: Any, field: str) -> int:
    try:
        return int(str(value).strip())
    except (TypeError, ValueError) as exc:
        raise DomainValidationError(f"{field} must be an integer", code=f"invalid_{field}", field=field) from exc


class CraService(BaseService):
    def _require_draft(self, cra: Cra) -> None:
        if not cra.is_draft:
            raise ConflictError(f"CRA is {cra.status.value} and cannot be modified", code="invalid_cra_state")

    def _count_entries(self, cra: Cra) -> int:
        return self.db.scalar(select(func.count()).select_from(active_entries_stmt(cra.id).subquery())) or 0

    def create(self, user: User, attributes: dict | None) -> ServiceResult:
        def action() -> ServiceResult:
            if not attributes:
                raise ContractViolation("CRA payload is required", code="missing_parameter")
            month = parse_int(require(attributes.get("month"), "month"), "month")
            year = parse_int(require(attributes.get("year"), "year"), "year")
            if not 1 <= month <= 12:
                raise DomainValidationError("month must be between 1 and 12", code="invalid_month", field="month")
            max_year = utcnow().year + YEARS_AHEAD
            if not MIN_YEAR <= year <= max_year:
                raise DomainValidationError(f"year must be between {MIN_YEAR} and {max_year}", code="invalid_year", field="year")
            currency = validate_currency(attributes.get("currency") or "EUR")
            description = attributes.get("description")
            validate_length(description, "description", maximum=MAX_DESCRIPTION_LENGTH)

            if not user_has_role(self.db, user.id, CompanyRole.INDEPENDENT):
                raise PermissionDenied("User must have an independent company", code="independent_company_required")

            duplicate = self.db.scalar(
                select(Cra.id).where(
                    Cra.created_by_user_id == user.id,
                    Cra.month == month,
                    Cra.year == year,
                    Cra.deleted_at.is_(None),
                )
            )
            if duplicate is not None:
                raise ConflictError("A CRA already exists for this period", code="duplicate_cra")

            cra = Cra(
                month=month,
                year=year,
                currency=currency,
                description=description,
                status=CraStatus.DRAFT,
                total_days=Decimal("0"),
                total_amount=0,
                created_by_user_id=user.id,
            )
            if self.settings.RELATION_DRIVEN:
                cra.user_cras.append(UserCra(user_id=user.id, role=RelationRole.CREATOR))
            self.db.add(cra)
            self.commit()
            self.logger.info(
                "cra.created",
                extra={"event": "cra.created", "cra_id": cra.id, "user_id": user.id, "period": cra.period_label},
            )
            self.metrics.increment("cra.created")
            return ServiceResult.created(cra=serialize_cra(cra))

        return self.run("cra.create", action)

    def get(self, user: User, cra_id: int) -> ServiceResult:
        def action() -> ServiceResult:
            cra = load_cra(self.db, user, cra_id)
            data = serialize_cra(cra)
            data["entries_count"] = self._count_entries(cra)
            return ServiceResult.ok(cra=data)

        return self.run("cra.get", action)

    def list(
        self,
        user: User,
        year: Any = None,
        month: Any = None,
        status: Any = None,
        currency: Any = None,
        page: Any = None,
        per_page: Any = None,
    ) -> ServiceResult:
        def action() -> ServiceResult:
            stmt = select(Cra).where(Cra.created_by_user_id == user.id, Cra.deleted_at.is_(None))

            if not is_blank(month) and is_blank(year):
                raise DomainValidationError("month filter requires year", code="month_requires_year", field="month")
            if not is_blank(year):
                year_value = parse_filter_int(year, "year")
                if year_value < MIN_YEAR:
                    raise DomainValidationError(f"year must be >= {MIN_YEAR}", code="invalid_year", field="year")
                stmt = stmt.where(Cra.year == year_value)
            if not is_blank(month):
                month_value = parse_filter_int(month, "month")
                if not 1 <= month_value <= 12:
                    raise DomainValidationError("month must be between 1 and 12", code="invalid_month", field="month")
                stmt = stmt.where(Cra.month == month_value)
            if not is_blank(status):
                stmt = stmt.where(Cra.status == validate_enum(status, CraStatus, "status"))
            if not is_blank(currency):
                stmt = stmt.where(Cra.currency == str(currency).strip().upper())

            stmt = stmt.order_by(Cra.year.desc(), Cra.month.desc(), Cra.id.desc())
            result_page = paginate(self.db, stmt, page=page, per_page=per_page)
            return ServiceResult.ok(meta=result_page.meta(), cras=[serialize_cra(cra) for cra in result_page.items])

        return self.run("cra.list", action)

    def update(self, user: User, cra_id: int, attributes: dict | None) -> ServiceResult:
        def action() -> ServiceResult:
            if not attributes:
                raise ContractViolation("CRA payload is required", code="missing_parameter")
            cra = load_cra(self.db, user, cra_id, for_write=True)
            self._require_draft(cra)
            if "description" in attributes:
                validate_length(attributes["description"], "description", maximum=MAX_DESCRIPTION_LENGTH)
                cra.description = attributes["description"]
            if "currency" in attributes:
                cra.currency = validate_currency(attributes["currency"])
            self.commit()
            self.logger.info("cra.updated", extra={"event": "cra.updated", "cra_id": cra.id})
            return ServiceResult.ok(cra=serialize_cra(cra))

        return self.run("cra.update", action)

    def destroy(self, user: User, cra_id: int) -> ServiceResult:
        def action() -> ServiceResult:
            cra = load_cra(self.db, user, cra_id, for_write=True)
            self._require_draft(cra)
            if self._count_entries(cra):
                raise ConflictError("CRA still has entries", code="cra_has_entries")
            cra.deleted_at = utcnow()
            self.commit()
            self.logger.info("cra.deleted", extra={"event": "cra.deleted", "cra_id": cra.id})
            self.metrics.increment("cra.deleted")
            return ServiceResult.ok(message="CRA deleted successfully")

        return self.run("cra.destroy", action)

    def submit(self, user: User, cra_id: int) -> ServiceResult:
        def action() -> ServiceResult:
            cra = load_cra(self.db, user, cra_id, for_write=True)
            CRA_STATE_MACHINE.assert_transition(cra.status.value, CraStatus.SUBMITTED.value)
            if not self._count_entries(cra):
                raise DomainValidationError("CRA must have at least one entry to be submitted", code="cra_empty")
            recalculate_totals(self.db, cra)
            cra.status = CraStatus.SUBMITTED
            cra.submitted_at = utcnow()
            self.commit()
            self.logger.info("cra.submitted", extra={"event": "cra.submitted", "cra_id": cra.id})
            self.metrics.increment("cra.submitted")
            return ServiceResult.ok(cra=serialize_cra(cra))

        return self.run("cra.submit", action)

    def lock(self, user: User, cra_id: int) -> ServiceResult:
        def action() -> ServiceResult:
            cra = load_cra(self.db, user, cra_id, for_write=True)
            if cra.status == CraStatus.LOCKED:
                raise ConflictError("CRA is already locked", code="cra_locked")
            CRA_STATE_MACHINE.assert_transition(cra.status.value, CraStatus.LOCKED.value)
            recalculate_totals(self.db, cra)
            cra.status = CraStatus.LOCKED
            cra.locked_at = utcnow()
            self.commit()
            self.logger.info("cra.locked", extra={"event": "cra.locked", "cra_id": cra.id})
            self.metrics.increment("cra.locked")
            return ServiceResult.ok(cra=serialize_cra(cra))

        return self.run("cra.lock", action)
