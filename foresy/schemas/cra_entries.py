"""CRA entry schema module."""

from __future__ import annotations

import datetime as dt
from typing import Any

from pydantic import BaseModel

from foresy.schemas.common import PaginationMeta


class CraEntryWriteRequest(BaseModel):
    date: str | None = None
    quantity: Any = None
    unit_price: Any = None
    description: str | None = None
    mission_id: Any = None


class CraTotals(BaseModel):
    total_days: float
    total_amount: int


class CraEntryOut(BaseModel):
    id: int
    cra_id: int | None = None
    mission_id: int | None = None
    date: dt.date
    quantity: float
    unit_price: int
    line_total: int
    description: str | None = None
    created_at: dt.datetime
    updated_at: dt.datetime


class CraEntryResponse(BaseModel):
    entry: CraEntryOut
    cra_totals: CraTotals


class CraEntryListResponse(BaseModel):
    entries: list[CraEntryOut]
    cra_totals: CraTotals
    meta: PaginationMeta


class CraEntryDeleteResponse(BaseModel):
    message: str
    cra_totals: CraTotals
