"""Common schema module."""

from __future__ import annotations

from pydantic import BaseModel


class MessageResponse(BaseModel):
    message: str


class ErrorEnvelope(BaseModel):
    error: str
    code: str | None = None
    field: str | None = None


class PaginationMeta(BaseModel):
    total: int
    page: int
    per_page: int
    pages: int
    prev: int | None = None
    next: int | None = None
