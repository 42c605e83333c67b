"""Apply the Alembic migrations to the configured database."""

from __future__ import annotations

import logging
from pathlib import Path

from alembic import command
from alembic.config import Config as AlembicConfig

import foresy.database.db as db_module
from foresy.core.startup import bootstrap

PROJECT_ROOT = Path(__file__).resolve().parents[2]

logger = logging.getLogger(__name__)


def build_alembic_config(database_url: str) -> AlembicConfig:
    cfg = AlembicConfig(str(PROJECT_ROOT / "alembic.ini"))
    cfg.set_main_option("script_location", str(PROJECT_ROOT / "migrations"))
    cfg.set_main_option("sqlalchemy.url", database_url)
    # Keep the application's logging setup intact.
    cfg.attributes["configure_logger"] = False
    return cfg


def upgrade(database_url: str | None = None, revision: str = "head") -> None:
    active_url = database_url or db_module.get_active_database_url()
    command.upgrade(build_alembic_config(active_url), revision)
    logger.info(
        "database.migrations.applied",
        extra={
            "event": "database.migrations.applied",
            "revision": revision,
            "database_url_scheme": active_url.split("://", 1)[0],
        },
    )


def downgrade(database_url: str | None = None, revision: str = "base") -> None:
    active_url = database_url or db_module.get_active_database_url()
    command.downgrade(build_alembic_config(active_url), revision)
    logger.info(
        "database.migrations.reverted",
        extra={"event": "database.migrations.reverted", "revision": revision},
    )


def main() -> None:
    bootstrap()
    upgrade()


if __name__ == "__main__":
    main()
