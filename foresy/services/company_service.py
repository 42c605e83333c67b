"""Companies and the user/company relation."""

from __future__ import annotations

import re

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from foresy.core.exceptions import ConflictError, DomainValidationError
from foresy.core.result import ServiceResult
from foresy.core.validators import require, validate_country, validate_currency, validate_enum, validate_length
from foresy.models import Company, User, UserCompany
from foresy.models.enums import CompanyRole
from foresy.services.base_service import BaseService

_WHITESPACE = re.compile(r"\s+")


def normalize_identifier(value: str | None) -> str | None:
    if value is None:
        return None
    return _WHITESPACE.sub("", str(value)) or None


def serialize_company(company: Company, role: CompanyRole | None = None) -> dict:
    data = {
        "id": company.id,
        "name": company.name,
        "siret": company.siret,
        "siren": company.siren,
        "country": company.country,
        "currency": company.currency,
    }
    if role is not None:
        data["role"] = role.value
    return data


def user_has_role(db, user_id: int, role: CompanyRole) -> bool:
    stmt = (
        select(UserCompany.id)
        .join(Company, Company.id == UserCompany.company_id)
        .where(UserCompany.user_id == user_id, UserCompany.role == role, Company.deleted_at.is_(None))
        .limit(1)
    )
    return db.scalar(stmt) is not None


def company_ids_for(db, user_id: int, role: CompanyRole | None = None) -> list[int]:
    stmt = select(UserCompany.company_id).where(UserCompany.user_id == user_id)
    if role is not None:
        stmt = stmt.where(UserCompany.role == role)
    return list(db.scalars(stmt))


class CompanyService(BaseService):
    def create(self, user: User, attributes: dict) -> ServiceResult:
        def action() -> ServiceResult:
            name = str(require(attributes.get("name"), "name")).strip()
            siret = normalize_identifier(require(attributes.get("siret"), "siret"))
            role = validate_enum(require(attributes.get("role"), "role"), CompanyRole, "role")
            validate_length(name, "name", maximum=255, minimum=2)
            if not siret or not siret.isdigit() or len(siret) != 14:
                raise DomainValidationError("siret must be 14 digits", code="invalid_siret", field="siret")
            siren = normalize_identifier(attributes.get("siren"))
            if siren is not None and (not siren.isdigit() or len(siren) != 9):
                raise DomainValidationError("siren must be 9 digits", code="invalid_siren", field="siren")
            country = validate_country(attributes.get("country") or "FR")
            currency = validate_currency(attributes.get("currency") or "EUR")

            if self.db.scalar(select(Company.id).where(Company.siret == siret)) is not None:
                raise ConflictError("siret has already been taken", code="siret_taken", field="siret")

            company = Company(name=name, siret=siret, siren=siren, country=country, currency=currency)
            self.db.add(company)
            try:
                self.db.flush()
            except IntegrityError as exc:
                raise ConflictError("siret has already been taken", code="siret_taken", field="siret") from exc
            self.db.add(UserCompany(user_id=user.id, company_id=company.id, role=role))
            self.commit()
            self.logger.info(
                "company.created",
                extra={"event": "company.created", "company_id": company.id, "user_id": user.id, "role": role.value},
            )
            self.metrics.increment("company.created", role=role.value)
            return ServiceResult.created(company=serialize_company(company, role))

        return self.run("company.create", action)

    def list_for_user(self, user: User) -> ServiceResult:
        def action() -> ServiceResult:
            rows = self.db.execute(
                select(Company, UserCompany.role)
                .join(UserCompany, UserCompany.company_id == Company.id)
                .where(UserCompany.user_id == user.id, Company.deleted_at.is_(None))
                .order_by(Company.name, Company.id)
            ).all()
            return ServiceResult.ok(companies=[serialize_company(company, role) for company, role in rows])

        return self.run("company.list", action)
