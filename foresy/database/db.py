"""Engine and session factory bound to ``DATABASE_URL``."""

from __future__ import annotations

import logging
from collections.abc import Generator

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from foresy.core.config import get_config

logger = logging.getLogger(__name__)

IN_MEMORY_SQLITE = {"sqlite://", "sqlite:///:memory:"}


def build_engine(database_url: str) -> Engine:
    if database_url.startswith("sqlite"):
        options: dict = {"connect_args": {"check_same_thread": False}}
        if database_url in IN_MEMORY_SQLITE:
            options["poolclass"] = StaticPool
        return create_engine(database_url, **options)
    return create_engine(database_url, pool_pre_ping=True, pool_recycle=3600, pool_size=10, max_overflow=20)


DATABASE_URL = get_config().DATABASE_URL
engine = build_engine(DATABASE_URL)
# Services commit explicitly and keep serializing objects after commit.
SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def get_active_database_url() -> str:
    return DATABASE_URL


def init_db() -> None:
    """Create missing tables straight from the model metadata (dev and tests)."""
    from foresy.models import Base

    Base.metadata.create_all(bind=engine)
    logger.info("database.tables.created", extra={"event": "database.tables.created"})


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def verify_database_connection() -> bool:
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        logger.error(
            "database.connection_failed",
            extra={"event": "database.connection_failed", "error_type": type(exc).__name__},
        )
        return False
    return True
