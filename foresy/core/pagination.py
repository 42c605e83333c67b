"""Page/per_page handling shared by list endpoints."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.orm import Session
from sqlalchemy.sql import Select

from foresy.core.config import get_config


@dataclass(frozen=True)
class Page:
    items: list[Any]
    total: int
    page: int
    per_page: int

    @property
    def pages(self) -> int:
        return math.ceil(self.total / self.per_page)

    def meta(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "page": self.page,
            "per_page": self.per_page,
            "pages": self.pages,
            "prev": self.page - 1 if self.page > 1 else None,
            "next": self.page + 1 if self.page < self.pages else None,
        }


def normalize_paging(page: Any = None, per_page: Any = None) -> tuple[int, int]:
    """Coerce paging params; page is at least 1 and per_page is clamped."""
    cfg = get_config()
    try:
        page_value = int(page) if page not in (None, "") else 1
    except (TypeError, ValueError):
        page_value = 1
    try:
        per_page_value = int(per_page) if per_page not in (None, "") else cfg.DEFAULT_PER_PAGE
    except (TypeError, ValueError):
        per_page_value = cfg.DEFAULT_PER_PAGE
    return max(1, page_value), min(max(1, per_page_value), cfg.MAX_PER_PAGE)


def paginate(db: Session, stmt: Select, page: Any = None, per_page: Any = None) -> Page:
    page_value, per_page_value = normalize_paging(page, per_page)
    total = db.scalar(select(func.count()).select_from(stmt.order_by(None).subquery())) or 0
    items = list(db.scalars(stmt.limit(per_page_value).offset((page_value - 1) * per_page_value)).unique())
    return Page(items=items, total=int(total), page=page_value, per_page=per_page_value)
