"""Dependency providers for API handlers."""

from __future__ import annotations

from collections.abc import Generator

from sqlalchemy.orm import Session

from foresy.core.config import Config, get_config
from foresy.core.metrics import LoggingMetricsSink, MetricsSink
from foresy.database.db import get_db

_metrics_sink: MetricsSink = LoggingMetricsSink()


def get_settings() -> Config:
    """Return validated application configuration."""
    return get_config()


def get_db_session() -> Generator[Session, None, None]:
    """Yield SQLAlchemy session for dependency injection."""
    yield from get_db()


def get_metrics() -> MetricsSink:
    return _metrics_sink
