"""Startup validation and bootstrap helpers."""

from __future__ import annotations

import logging

from foresy.core.config import get_config
from foresy.core.logging_config import configure_logging
from foresy.database.db import get_active_database_url, init_db, verify_database_connection

logger = logging.getLogger(__name__)

MIN_JWT_SECRET_BYTES = 32


def auth_settings_summary(config) -> dict:
    """Token and session lifetimes reported at startup."""
    return {
        "jwt_algorithm": config.JWT_ALGORITHM,
        "access_token_ttl_minutes": config.ACCESS_TOKEN_TTL_MINUTES,
        "refresh_token_ttl_days": config.REFRESH_TOKEN_TTL_DAYS,
        "session_ttl_hours": config.SESSION_TTL_HOURS,
        "rate_limit": f"{config.RATE_LIMIT_MAX_REQUESTS}/{config.RATE_LIMIT_WINDOW_SECONDS}s",
    }


def _check_auth_settings(config) -> None:
    if len(config.JWT_SECRET.encode("utf-8")) < MIN_JWT_SECRET_BYTES:
        logger.warning(
            "startup.jwt_secret.short",
            extra={"event": "startup.jwt_secret.short", "min_bytes": MIN_JWT_SECRET_BYTES},
        )
    if config.ACCESS_TOKEN_TTL_MINUTES > config.SESSION_TTL_HOURS * 60:
        logger.warning(
            "startup.access_token.outlives_session",
            extra={"event": "startup.access_token.outlives_session", **auth_settings_summary(config)},
        )


def validate_startup_config() -> None:
    """Fail-fast config and connectivity checks."""
    config = get_config()
    database_ok = verify_database_connection()
    active_database_url = get_active_database_url()
    if not database_ok and config.DB_CONNECTIVITY_REQUIRED:
        raise RuntimeError("Database connectivity check failed.")
    if not database_ok:
        logger.warning(
            "startup.database.connectivity_optional_failed",
            extra={"event": "startup.database.connectivity_optional_failed"},
        )

    if config.is_production and active_database_url.startswith("sqlite"):
        logger.warning(
            "startup.production.sqlite_detected",
            extra={"event": "startup.production.sqlite_detected"},
        )

    _check_auth_settings(config)

    logger.info(
        "startup.config.validated",
        extra={
            "event": "startup.config.validated",
            "env": config.ENV,
            "database_url_scheme": active_database_url.split("://", 1)[0],
            "db_connectivity_required": config.DB_CONNECTIVITY_REQUIRED,
            "relation_driven": config.RELATION_DRIVEN,
            **auth_settings_summary(config),
        },
    )


def bootstrap(create_schema: bool = False) -> None:
    """Initialize logging and validate runtime configuration.

    ``create_schema`` creates missing tables directly; deployments run the
    Alembic migrations instead.
    """
    configure_logging()
    validate_startup_config()
    if create_schema:
        init_db()
