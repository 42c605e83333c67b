"""Mission lifecycle: creation, updates, status transitions and archiving."""

from __future__ import annotations

from datetime import date
from typing import Any

from sqlalchemy import exists, or_, select

from foresy.core.exceptions import ConflictError, ContractViolation, DomainValidationError, NotFoundError, PermissionDenied
from foresy.core.pagination import paginate
from foresy.core.result import ServiceResult
from foresy.core.state_machine import MISSION_STATE_MACHINE
from foresy.core.validators import (
    is_blank,
    parse_date,
    parse_int,
    require,
    validate_currency,
    validate_enum,
    validate_length,
)
from foresy.models import Company, CraEntry, CraEntryMission, Mission, MissionCompany, User, UserCompany, UserMission
from foresy.models.base import utcnow
from foresy.models.enums import CompanyRole, MissionStatus, MissionType, RelationRole
from foresy.services.base_service import BaseService
from foresy.services.company_service import company_ids_for

MAX_DAILY_RATE = 100_000_000
MAX_FIXED_PRICE = 1_000_000_000
MAX_DESCRIPTION_LENGTH = 2000
UPDATABLE_FIELDS = ("name", "description", "mission_type", "status", "start_date", "end_date", "daily_rate", "fixed_price", "currency")


def serialize_mission(mission: Mission) -> dict:
    return {
        "id": mission.id,
        "name": mission.name,
        "description": mission.description,
        "mission_type": mission.mission_type.value,
        "status": mission.status.value,
        "start_date": mission.start_date,
        "end_date": mission.end_date,
        "daily_rate": mission.daily_rate,
        "fixed_price": mission.fixed_price,
        "currency": mission.currency,
        "independent_company_id": mission.company_id_for(CompanyRole.INDEPENDENT),
        "client_company_id": mission.company_id_for(CompanyRole.CLIENT),
        "created_by_user_id": mission.created_by_user_id,
        "created_at": mission.created_at,
        "updated_at": mission.updated_at,
    }


def validate_financials(mission_type: MissionType, daily_rate: Any, fixed_price: Any) -> tuple[int | None, int | None]:
    """Return the (daily_rate, fixed_price) pair that matches the mission type."""
    if mission_type == MissionType.TIME_BASED:
        if is_blank(daily_rate):
            raise DomainValidationError("daily_rate is required for time_based missions", field="daily_rate")
        if not is_blank(fixed_price):
            raise DomainValidationError("fixed_price must be empty for time_based missions", field="fixed_price")
        rate = parse_int(daily_rate, "daily_rate")
        if not 0 < rate <= MAX_DAILY_RATE:
            raise DomainValidationError("daily_rate is out of range", field="daily_rate")
        return rate, None

    if is_blank(fixed_price):
        raise DomainValidationError("fixed_price is required for fixed_price missions", field="fixed_price")
    if not is_blank(daily_rate):
        raise DomainValidationError("daily_rate must be empty for fixed_price missions", field="daily_rate")
    price = parse_int(fixed_price, "fixed_price")
    if not 0 < price <= MAX_FIXED_PRICE:
        raise DomainValidationError("fixed_price is out of range", field="fixed_price")
    return None, price


def validate_dates(start_date: date, end_date: date | None) -> None:
    if end_date is not None and end_date < start_date:
        raise DomainValidationError("end_date must be on or after start_date", code="invalid_dates", field="end_date")


def accessible_missions_clause(db, user_id: int):
    """SQL condition matching missions the user created, joined or shares a company with."""
    company_ids = company_ids_for(db, user_id)
    clauses = [
        Mission.created_by_user_id == user_id,
        exists().where(UserMission.mission_id == Mission.id, UserMission.user_id == user_id),
    ]
    if company_ids:
        clauses.append(exists().where(MissionCompany.mission_id == Mission.id, MissionCompany.company_id.in_(company_ids)))
    return or_(*clauses)


class MissionService(BaseService):
    def _independent_company(self, user: User) -> UserCompany:
        link = self.db.scalar(
            select(UserCompany)
            .join(Company, Company.id == UserCompany.company_id)
            .where(
                UserCompany.user_id == user.id,
                UserCompany.role == CompanyRole.INDEPENDENT,
                Company.deleted_at.is_(None),
            )
            .order_by(UserCompany.id)
            .limit(1)
        )
        if link is None:
            raise PermissionDenied("User must have an independent company", code="independent_company_required")
        return link

    def _load(self, user: User, mission_id: int) -> Mission:
        mission = self.db.scalar(
            select(Mission).where(
                Mission.id == mission_id,
                Mission.deleted_at.is_(None),
                accessible_missions_clause(self.db, user.id),
            )
        )
        if mission is None:
            raise NotFoundError("Mission not found", code="mission_not_found")
        return mission

    def _load_for_write(self, user: User, mission_id: int) -> Mission:
        mission = self._load(user, mission_id)
        if mission.created_by_user_id != user.id:
            raise PermissionDenied("Only the mission creator can modify it", code="not_mission_creator")
        return mission

    def create(self, user: User, attributes: dict | None) -> ServiceResult:
        def action() -> ServiceResult:
            if not attributes:
                raise ContractViolation("Mission payload is required", code="missing_parameter")
            name = str(require(attributes.get("name"), "name")).strip()
            raw_type = require(attributes.get("mission_type"), "mission_type")
            start_date = parse_date(attributes.get("start_date"), "start_date")
            end_date = None if is_blank(attributes.get("end_date")) else parse_date(attributes.get("end_date"), "end_date")

            mission_type = validate_enum(raw_type, MissionType, "mission_type")
            status = MissionStatus.LEAD
            if not is_blank(attributes.get("status")):
                status = validate_enum(attributes["status"], MissionStatus, "status")
            validate_dates(start_date, end_date)
            daily_rate, fixed_price = validate_financials(mission_type, attributes.get("daily_rate"), attributes.get("fixed_price"))
            currency = validate_currency(attributes.get("currency") or "EUR")
            description = attributes.get("description")
            validate_length(name, "name", maximum=255, minimum=2)
            validate_length(description, "description", maximum=MAX_DESCRIPTION_LENGTH)

            independent = self._independent_company(user)
            client_company_id = attributes.get("client_company_id")
            client = None
            if not is_blank(client_company_id):
                client = self.db.scalar(
                    select(Company).where(
                        Company.id == parse_int(client_company_id, "client_company_id"),
                        Company.deleted_at.is_(None),
                    )
                )
                if client is None:
                    raise NotFoundError("Client company not found", code="company_not_found", field="client_company_id")

            mission = Mission(
                name=name,
                description=description,
                mission_type=mission_type,
                status=status,
                start_date=start_date,
                end_date=end_date,
                daily_rate=daily_rate,
                fixed_price=fixed_price,
                currency=currency,
                created_by_user_id=user.id,
            )
            mission.mission_companies.append(MissionCompany(company_id=independent.company_id, role=CompanyRole.INDEPENDENT))
            if client is not None:
                mission.mission_companies.append(MissionCompany(company_id=client.id, role=CompanyRole.CLIENT))
            if self.settings.RELATION_DRIVEN:
                mission.user_missions.append(UserMission(user_id=user.id, role=RelationRole.CREATOR))
            self.db.add(mission)
            self.commit()

            self.logger.info(
                "mission.created",
                extra={"event": "mission.created", "mission_id": mission.id, "user_id": user.id},
            )
            self.metrics.increment("mission.created", mission_type=mission_type.value)
            return ServiceResult.created(mission=serialize_mission(mission))

        return self.run("mission.create", action)

    def get(self, user: User, mission_id: int) -> ServiceResult:
        return self.run("mission.get", lambda: ServiceResult.ok(mission=serialize_mission(self._load(user, mission_id))))

    def list(self, user: User, page: Any = None, per_page: Any = None, status: str | None = None) -> ServiceResult:
        def action() -> ServiceResult:
            stmt = (
                select(Mission)
                .where(Mission.deleted_at.is_(None), accessible_missions_clause(self.db, user.id))
                .order_by(Mission.created_at.desc(), Mission.id.desc())
            )
            if not is_blank(status):
                stmt = stmt.where(Mission.status == validate_enum(status, MissionStatus, "status"))
            result_page = paginate(self.db, stmt, page=page, per_page=per_page)
            return ServiceResult.ok(
                meta=result_page.meta(),
                missions=[serialize_mission(mission) for mission in result_page.items],
            )

        return self.run("mission.list", action)

    def update(self, user: User, mission_id: int, attributes: dict | None) -> ServiceResult:
        def action() -> ServiceResult:
            if not attributes:
                raise ContractViolation("Mission payload is required", code="missing_parameter")
            mission = self._load_for_write(user, mission_id)
            if mission.status == MissionStatus.COMPLETED:
                raise ConflictError("Completed missions cannot be modified", code="mission_completed")
            changes = {key: attributes[key] for key in UPDATABLE_FIELDS if key in attributes}

            if "status" in changes:
                target = validate_enum(require(changes["status"], "status"), MissionStatus, "status")
                if target != mission.status:
                    MISSION_STATE_MACHINE.assert_transition(mission.status.value, target.value)
                    mission.status = target

            mission_type = mission.mission_type
            if "mission_type" in changes:
                mission_type = validate_enum(require(changes["mission_type"], "mission_type"), MissionType, "mission_type")

            start_date = mission.start_date
            if "start_date" in changes:
                start_date = parse_date(changes["start_date"], "start_date")
            end_date = mission.end_date
            if "end_date" in changes:
                end_date = None if is_blank(changes["end_date"]) else parse_date(changes["end_date"], "end_date")
            validate_dates(start_date, end_date)

            daily_rate = changes.get("daily_rate", mission.daily_rate)
            fixed_price = changes.get("fixed_price", mission.fixed_price)
            if "mission_type" in changes and mission_type != mission.mission_type:
                # Switching type drops the stored amount of the old type unless explicitly sent.
                if mission_type == MissionType.TIME_BASED and "fixed_price" not in changes:
                    fixed_price = None
                if mission_type == MissionType.FIXED_PRICE and "daily_rate" not in changes:
                    daily_rate = None
            daily_rate, fixed_price = validate_financials(mission_type, daily_rate, fixed_price)

            if "name" in changes:
                name = str(require(changes["name"], "name")).strip()
                validate_length(name, "name", maximum=255, minimum=2)
                mission.name = name
            if "description" in changes:
                validate_length(changes["description"], "description", maximum=MAX_DESCRIPTION_LENGTH)
                mission.description = changes["description"]
            if "currency" in changes:
                mission.currency = validate_currency(changes["currency"])

            mission.mission_type = mission_type
            mission.start_date = start_date
            mission.end_date = end_date
            mission.daily_rate = daily_rate
            mission.fixed_price = fixed_price
            self.commit()

            self.logger.info(
                "mission.updated",
                extra={"event": "mission.updated", "mission_id": mission.id, "status": mission.status.value},
            )
            return ServiceResult.ok(mission=serialize_mission(mission))

        return self.run("mission.update", action)

    def archive(self, user: User, mission_id: int) -> ServiceResult:
        def action() -> ServiceResult:
            mission = self._load_for_write(user, mission_id)
            referenced = self.db.scalar(
                select(CraEntryMission.id)
                .join(CraEntry, CraEntry.id == CraEntryMission.cra_entry_id)
                .where(CraEntryMission.mission_id == mission.id, CraEntry.deleted_at.is_(None))
                .limit(1)
            )
            if referenced is not None:
                raise ConflictError("Mission is referenced by activity entries", code="mission_in_use")
            mission.deleted_at = utcnow()
            self.commit()
            self.logger.info("mission.archived", extra={"event": "mission.archived", "mission_id": mission.id})
            self.metrics.increment("mission.archived")
            return ServiceResult.ok(message="Mission archived successfully")

        return self.run("mission.archive", action)
