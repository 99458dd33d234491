"""Environment-backed configuration for the trade journal database."""

from __future__ import annotations

from dataclasses import dataclass
import os

DEFAULT_DATABASE_URL = "sqlite:///trade_journal.db"


@dataclass(frozen=True)
class JournalConfig:
    """Database connection settings."""

    database_url: str
    sql_echo: bool


def _read_env(name: str, default: str | None = None) -> str:
    value = os.getenv(name, default)
    if value is None or value.strip() == "":
        raise RuntimeError(f"Missing required environment variable: {name}")
    return value.strip()


def _read_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    normalized = raw.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    raise RuntimeError(f"Invalid boolean value for {name}: {raw}")


def load_config() -> JournalConfig:
    """Load configuration from ``JOURNAL_*`` environment variables."""
    return JournalConfig(
        database_url=_read_env("JOURNAL_DATABASE_URL", DEFAULT_DATABASE_URL),
        sql_echo=_read_bool("JOURNAL_SQL_ECHO", False),
    )
