"""Engine and session helpers."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
import logging
from typing import Any

from sqlalchemy import Connection, Engine, create_engine, event
from sqlalchemy.orm import Session, sessionmaker

logger = logging.getLogger(__name__)


def _configure_sqlite_connection(dbapi_conn: Any, connection_record: Any) -> None:
    # pysqlite must not emit its own BEGIN, or SAVEPOINT breaks.
    dbapi_conn.isolation_level = None
    cursor = dbapi_conn.cursor()
    try:
        cursor.execute("PRAGMA foreign_keys=ON")
    finally:
        cursor.close()


def _begin_sqlite_transaction(conn: Connection) -> None:
    conn.exec_driver_sql("BEGIN")


def create_journal_engine(database_url: str, echo: bool = False) -> Engine:
    """Create an engine.

    SQLite connections get foreign key enforcement and explicit ``BEGIN`` so
    savepoints nest inside the caller's transaction.
    """
    engine = create_engine(database_url, echo=echo)
    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _configure_sqlite_connection)
        event.listen(engine, "begin", _begin_sqlite_transaction)
    logger.info("Created database engine for dialect %s.", engine.dialect.name)
    return engine


def make_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@contextmanager
def session_scope(factory: sessionmaker[Session]) -> Iterator[Session]:
    """Commit on success; roll back and re-raise on any error."""
    session = factory()
    try:
        yield session
        session.commit()
    except Exception:
        logger.exception("Database transaction failed; rolling back.")
        session.rollback()
        raise
    finally:
        session.close()
