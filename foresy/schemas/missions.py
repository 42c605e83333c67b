"""Mission schema module.

Request fields are loosely typed so that business rules are reported by the
service layer with their own status codes.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel

from foresy.schemas.common import PaginationMeta


class MissionWriteRequest(BaseModel):
    name: str | None = None
    description: str | None = None
    mission_type: str | None = None
    status: str | None = None
    start_date: str | None = None
    end_date: str | None = None
    daily_rate: Any = None
    fixed_price: Any = None
    currency: str | None = None
    client_company_id: Any = None


class MissionOut(BaseModel):
    id: int
    name: str
    description: str | None = None
    mission_type: str
    status: str
    start_date: date
    end_date: date | None = None
    daily_rate: int | None = None
    fixed_price: int | None = None
    currency: str
    independent_company_id: int | None = None
    client_company_id: int | None = None
    created_by_user_id: int
    created_at: datetime
    updated_at: datetime


class MissionResponse(BaseModel):
    mission: MissionOut


class MissionListResponse(BaseModel):
    missions: list[MissionOut]
    meta: PaginationMeta
