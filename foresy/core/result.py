"""Explicit success/failure values returned by service objects."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from foresy.core.exceptions import ForesyException
from foresy.core.http_status import http_status


@dataclass(frozen=True)
class ServiceResult:
    success: bool
    status: str
    data: dict[str, Any] = field(default_factory=dict)
    error: str | None = None
    message: str | None = None
    meta: dict[str, Any] = field(default_factory=dict)

    @property
    def failure(self) -> bool:
        return not self.success

    @property
    def http_status(self) -> int:
        return http_status(self.status)

    def value(self, key: str) -> Any:
        """Return a data item of a successful result."""
        if not self.success:
            raise ValueError(f"Cannot read '{key}' from failed result: {self.error}")
        return self.data[key]

    @classmethod
    def ok(cls, message: str | None = None, meta: dict[str, Any] | None = None, **data: Any) -> "ServiceResult":
        return cls(success=True, status="ok", data=data, message=message, meta=meta or {})

    @classmethod
    def created(cls, message: str | None = None, **data: Any) -> "ServiceResult":
        return cls(success=True, status="created", data=data, message=message)

    @classmethod
    def fail(cls, status: str, error: str, message: str | None = None) -> "ServiceResult":
        return cls(success=False, status=status, error=error, message=message)

    @classmethod
    def from_exception(cls, exc: ForesyException) -> "ServiceResult":
        return cls.fail(status=exc.status_key, error=exc.error_code, message=exc.message)
