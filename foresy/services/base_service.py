"""Shared service base with session lifecycle and result boundary."""

from __future__ import annotations

import logging
from collections.abc import Callable

from sqlalchemy.orm import Session

from foresy.core.config import Config, get_config
from foresy.core.exceptions import ForesyException
from foresy.core.metrics import LoggingMetricsSink, MetricsSink
from foresy.core.result import ServiceResult
from foresy.database import db as database


class BaseService:
    """Base class for services that operate on a SQLAlchemy session."""

    def __init__(
        self,
        db: Session | None = None,
        logger: logging.Logger | None = None,
        metrics: MetricsSink | None = None,
        settings: Config | None = None,
    ) -> None:
        self.db = db or database.SessionLocal()
        self.logger = logger or logging.getLogger(type(self).__module__)
        self.metrics = metrics or LoggingMetricsSink(self.logger)
        self.settings = settings or get_config()

    def commit(self) -> None:
        """Commit current transaction and rollback on failure."""
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

    def rollback(self) -> None:
        self.db.rollback()

    def close(self) -> None:
        self.db.close()

    def run(self, operation: str, action: Callable[[], ServiceResult]) -> ServiceResult:
        """Execute ``action`` and turn raised errors into failed results.

        Any failure rolls back the open transaction. Unexpected exceptions are
        logged by class name only and surface as ``internal_error``.
        """
        try:
            return action()
        except ForesyException as exc:
            self.rollback()
            self.logger.info(
                f"{operation}.rejected",
                extra={"event": f"{operation}.rejected", "code": exc.error_code, "status": exc.status_key},
            )
            self.metrics.increment(f"{operation}.failed", code=exc.error_code)
            return ServiceResult.from_exception(exc)
        except Exception as exc:
            self.rollback()
            self.logger.error(
                f"{operation}.failed",
                extra={"event": f"{operation}.failed", "error_type": type(exc).__name__},
            )
            self.metrics.increment(f"{operation}.failed", code="internal_error")
            return ServiceResult.fail("internal_error", "internal_error", "Internal server error")

    def __enter__(self) -> "BaseService":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if exc_type:
            self.rollback()
        self.close()
