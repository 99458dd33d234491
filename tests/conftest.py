"""Pytest fixtures shared across unit and integration tests."""

from __future__ import annotations

import os
from typing import Any, Iterator

import pytest
from sqlalchemy import Engine
from sqlalchemy.engine import URL
from sqlalchemy.orm import Session

from journal.db.migrate import downgrade, upgrade
from journal.db.session import create_journal_engine, make_session_factory

SQLITE_MEMORY_URL = "sqlite://"


@pytest.fixture
def engine() -> Iterator[Engine]:
    """In-memory SQLite engine migrated to head."""
    engine = create_journal_engine(SQLITE_MEMORY_URL)
    with engine.connect() as conn:
        upgrade(SQLITE_MEMORY_URL, connection=conn)
        conn.commit()
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def session(engine: Engine) -> Iterator[Session]:
    factory = make_session_factory(engine)
    session = factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="session")
def pg_url() -> Any:
    """PostgreSQL URL for integration tests."""
    host = os.getenv("TEST_DB_HOST")
    port = os.getenv("TEST_DB_PORT")
    dbname = os.getenv("TEST_DB_NAME")
    user = os.getenv("TEST_DB_USER")
    password = os.getenv("TEST_DB_PASSWORD")

    if not all([host, port, dbname, user, password]):
        pytest.skip("Integration DB env vars are missing; set TEST_DB_* to run PostgreSQL tests")

    return URL.create(
        "postgresql+psycopg",
        username=user,
        password=password,
        host=host,
        port=int(port),
        database=dbname,
    ).render_as_string(hide_password=False)


@pytest.fixture
def pg_engine(pg_url: str) -> Iterator[Engine]:
    """PostgreSQL engine migrated to head for the duration of one test."""
    engine = create_journal_engine(pg_url)
    upgrade(pg_url)
    try:
        yield engine
    finally:
        engine.dispose()
        downgrade(pg_url)
