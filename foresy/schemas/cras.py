"""CRA schema module."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel

from foresy.schemas.common import PaginationMeta


class CraWriteRequest(BaseModel):
    month: Any = None
    year: Any = None
    description: str | None = None
    currency: str | None = None


class CraOut(BaseModel):
    id: int
    month: int
    year: int
    description: str | None = None
    status: str
    total_days: float
    total_amount: int
    currency: str
    created_by_user_id: int
    submitted_at: datetime | None = None
    locked_at: datetime | None = None
    created_at: datetime
    updated_at: datetime
    entries_count: int | None = None


class CraResponse(BaseModel):
    cra: CraOut


class CraListResponse(BaseModel):
    cras: list[CraOut]
    meta: PaginationMeta
