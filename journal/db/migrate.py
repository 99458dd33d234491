"""Programmatic Alembic entry points for the trade journal schema."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from alembic import command
from alembic.config import Config
from alembic.runtime.migration import MigrationContext
from sqlalchemy import Connection

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = Path(__file__).resolve().parent / "migrations"


def build_alembic_config(database_url: str, connection: Optional[Connection] = None) -> Config:
    """Alembic config pointing at the packaged migrations directory."""
    config = Config()
    config.set_main_option("script_location", str(MIGRATIONS_DIR))
    config.set_main_option("sqlalchemy.url", database_url.replace("%", "%%"))
    if connection is not None:
        config.attributes["connection"] = connection
    return config


def upgrade(database_url: str, revision: str = "head", connection: Optional[Connection] = None) -> None:
    logger.info("Upgrading schema to %s.", revision)
    command.upgrade(build_alembic_config(database_url, connection), revision)


def downgrade(database_url: str, revision: str = "base", connection: Optional[Connection] = None) -> None:
    logger.info("Downgrading schema to %s.", revision)
    command.downgrade(build_alembic_config(database_url, connection), revision)


def current_revision(connection: Connection) -> Optional[str]:
    """Revision recorded in ``alembic_version``, or None for an unmigrated database."""
    return MigrationContext.configure(connection).get_current_revision()
