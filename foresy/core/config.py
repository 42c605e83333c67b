"""Configuration module for the Foresy application."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from urllib.parse import urlparse

from dotenv import load_dotenv

from foresy.core.exceptions import ConfigurationError

load_dotenv()

PLACEHOLDER_JWT_SECRET = "change_me_jwt_secret"


def _as_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer.") from exc


@dataclass(frozen=True)
class Config:
    """Runtime configuration with validation."""

    APP_NAME: str
    APP_VERSION: str
    ENV: str
    DEBUG: bool
    DATABASE_URL: str
    DB_CONNECTIVITY_REQUIRED: bool
    JWT_SECRET: str
    JWT_ALGORITHM: str
    ACCESS_TOKEN_TTL_MINUTES: int
    REFRESH_TOKEN_TTL_DAYS: int
    SESSION_TTL_HOURS: int
    BCRYPT_ROUNDS: int
    RELATION_DRIVEN: bool
    RATE_LIMIT_MAX_REQUESTS: int
    RATE_LIMIT_WINDOW_SECONDS: int
    DEFAULT_PER_PAGE: int
    MAX_PER_PAGE: int
    API_HOST: str
    API_PORT: int
    API_PREFIX: str
    LOG_LEVEL: str
    LOG_FILE: str

    @property
    def is_production(self) -> bool:
        return self.ENV == "production"


def _build_config(env: str | None = None) -> Config:
    resolved_env = (env or os.getenv("ENV", "development")).strip().lower()
    debug = _as_bool(os.getenv("DEBUG"), default=(resolved_env != "production"))

    config = Config(
        APP_NAME="Foresy",
        APP_VERSION=os.getenv("APP_VERSION", "1.0.0"),
        ENV=resolved_env,
        DEBUG=debug if resolved_env != "production" else False,
        DATABASE_URL=os.getenv("DATABASE_URL", "sqlite:///./foresy.db"),
        DB_CONNECTIVITY_REQUIRED=_as_bool(
            os.getenv("DB_CONNECTIVITY_REQUIRED"), default=(resolved_env == "production")
        ),
        JWT_SECRET=os.getenv("JWT_SECRET", PLACEHOLDER_JWT_SECRET),
        JWT_ALGORITHM=os.getenv("JWT_ALGORITHM", "HS256"),
        ACCESS_TOKEN_TTL_MINUTES=_env_int("ACCESS_TOKEN_TTL_MINUTES", 15),
        REFRESH_TOKEN_TTL_DAYS=_env_int("REFRESH_TOKEN_TTL_DAYS", 30),
        SESSION_TTL_HOURS=_env_int("SESSION_TTL_HOURS", 24),
        BCRYPT_ROUNDS=_env_int("BCRYPT_ROUNDS", 12),
        RELATION_DRIVEN=_as_bool(os.getenv("RELATION_DRIVEN"), default=True),
        RATE_LIMIT_MAX_REQUESTS=_env_int("RATE_LIMIT_MAX_REQUESTS", 5),
        RATE_LIMIT_WINDOW_SECONDS=_env_int("RATE_LIMIT_WINDOW_SECONDS", 60),
        DEFAULT_PER_PAGE=_env_int("DEFAULT_PER_PAGE", 20),
        MAX_PER_PAGE=_env_int("MAX_PER_PAGE", 100),
        API_HOST=os.getenv("API_HOST", "0.0.0.0"),
        API_PORT=_env_int("API_PORT", 8000),
        API_PREFIX=os.getenv("API_PREFIX", "/api/v1"),
        LOG_LEVEL=os.getenv("LOG_LEVEL", "INFO").upper(),
        LOG_FILE=os.getenv("LOG_FILE", ""),
    )
    _validate_config(config)
    return config


def _validate_database_url(database_url: str) -> None:
    parsed = urlparse(database_url)
    if parsed.scheme not in {"sqlite", "postgresql", "postgresql+psycopg2"}:
        raise ConfigurationError(
            "DATABASE_URL must use sqlite:// or postgresql:// style URL."
        )
    if parsed.scheme.startswith("postgresql") and not parsed.hostname:
        raise ConfigurationError("PostgreSQL DATABASE_URL is missing hostname.")


def _validate_config(config: Config) -> None:
    _validate_database_url(config.DATABASE_URL)

    if config.JWT_ALGORITHM not in {"HS256", "HS384", "HS512"}:
        raise ConfigurationError("JWT_ALGORITHM must be one of HS256/HS384/HS512.")
    if config.ACCESS_TOKEN_TTL_MINUTES < 1:
        raise ConfigurationError("ACCESS_TOKEN_TTL_MINUTES must be >= 1.")
    if config.REFRESH_TOKEN_TTL_DAYS < 1:
        raise ConfigurationError("REFRESH_TOKEN_TTL_DAYS must be >= 1.")
    if config.SESSION_TTL_HOURS < 1:
        raise ConfigurationError("SESSION_TTL_HOURS must be >= 1.")
    if not 4 <= config.BCRYPT_ROUNDS <= 31:
        raise ConfigurationError("BCRYPT_ROUNDS must be between 4 and 31.")
    if config.RATE_LIMIT_MAX_REQUESTS < 1 or config.RATE_LIMIT_WINDOW_SECONDS < 1:
        raise ConfigurationError("Rate limit settings must be >= 1.")
    if not 1 <= config.DEFAULT_PER_PAGE <= config.MAX_PER_PAGE:
        raise ConfigurationError("DEFAULT_PER_PAGE must be between 1 and MAX_PER_PAGE.")
    if config.LOG_LEVEL not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
        raise ConfigurationError("LOG_LEVEL must be one of DEBUG/INFO/WARNING/ERROR/CRITICAL.")
    if config.is_production and config.JWT_SECRET == PLACEHOLDER_JWT_SECRET:
        raise ConfigurationError("Production JWT_SECRET uses the placeholder value.")
    if config.is_production and "change_me" in config.DATABASE_URL.lower():
        raise ConfigurationError("Production DATABASE_URL uses placeholder credentials.")


@lru_cache(maxsize=8)
def get_config(env: str | None = None) -> Config:
    """Get validated configuration for the requested environment."""
    return _build_config(env)
