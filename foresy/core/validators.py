"""Field coercion helpers shared by service objects.

Helpers raise ``ContractViolation`` when a value is missing or unparseable and
``DomainValidationError`` when a well-formed value breaks a business rule.
"""

from __future__ import annotations

import re
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any

from foresy.core.exceptions import ContractViolation, DomainValidationError

ISO_4217_CODES = frozenset(
    {
        "AED", "ARS", "AUD", "BGN", "BRL", "CAD", "CHF", "CLP", "CNY", "COP", "CZK", "DKK", "EGP",
        "EUR", "GBP", "HKD", "HUF", "IDR", "ILS", "INR", "ISK", "JPY", "KRW", "MAD", "MXN", "MYR",
        "NOK", "NZD", "PEN", "PHP", "PLN", "RON", "RUB", "SAR", "SEK", "SGD", "THB", "TND", "TRY",
        "TWD", "UAH", "USD", "VND", "XAF", "XOF", "ZAR",
    }
)

_COUNTRY_PATTERN = re.compile(r"^[A-Z]{2}$")


def is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def require(value: Any, field: str) -> Any:
    if is_blank(value):
        raise ContractViolation(f"{field} is required", code="missing_parameter", field=field)
    return value


def parse_date(value: Any, field: str) -> date:
    if isinstance(value, date):
        return value
    require(value, field)
    try:
        return date.fromisoformat(str(value).strip())
    except ValueError as exc:
        raise ContractViolation(f"{field} is not a valid date", code="invalid_date", field=field) from exc


def parse_int(value: Any, field: str) -> int:
    if isinstance(value, bool):
        raise ContractViolation(f"{field} must be an integer", field=field)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not value.is_integer():
            raise DomainValidationError(f"{field} must be an integer", field=field)
        return int(value)
    try:
        return int(str(value).strip())
    except (TypeError, ValueError) as exc:
        raise ContractViolation(f"{field} must be an integer", field=field) from exc


def parse_decimal(value: Any, field: str) -> Decimal:
    if isinstance(value, bool):
        raise ContractViolation(f"{field} must be a number", field=field)
    try:
        parsed = Decimal(str(value).strip())
    except (InvalidOperation, ValueError) as exc:
        raise ContractViolation(f"{field} must be a number", field=field) from exc
    if not parsed.is_finite():
        raise ContractViolation(f"{field} must be a number", field=field)
    return parsed


def validate_length(value: str | None, field: str, maximum: int, minimum: int = 0) -> None:
    if value is None:
        return
    if len(value) > maximum:
        raise DomainValidationError(f"{field} is too long (maximum is {maximum} characters)", field=field)
    if len(value) < minimum:
        raise DomainValidationError(f"{field} is too short (minimum is {minimum} characters)", field=field)


def validate_currency(value: Any, field: str = "currency") -> str:
    code = str(value or "").strip().upper()
    if code not in ISO_4217_CODES:
        raise DomainValidationError(f"{field} must be a valid ISO 4217 code", code="invalid_currency", field=field)
    return code


def validate_country(value: Any, field: str = "country") -> str:
    code = str(value or "").strip().upper()
    if not _COUNTRY_PATTERN.match(code):
        raise DomainValidationError(f"{field} must be an ISO 3166 alpha-2 code", field=field)
    return code


def validate_enum(value: Any, enum_cls: type, field: str):
    try:
        return enum_cls(str(value).strip())
    except ValueError as exc:
        allowed = ", ".join(member.value for member in enum_cls)
        raise DomainValidationError(f"{field} must be one of: {allowed}", code=f"invalid_{field}", field=field) from exc
