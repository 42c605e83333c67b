"""Company schema module."""

from __future__ import annotations

from pydantic import BaseModel


class CompanyCreateRequest(BaseModel):
    name: str | None = None
    siret: str | None = None
    siren: str | None = None
    country: str | None = None
    currency: str | None = None
    role: str | None = None


class CompanyOut(BaseModel):
    id: int
    name: str
    siret: str
    siren: str | None = None
    country: str
    currency: str
    role: str | None = None


class CompanyResponse(BaseModel):
    company: CompanyOut


class CompanyListResponse(BaseModel):
    companies: list[CompanyOut]
