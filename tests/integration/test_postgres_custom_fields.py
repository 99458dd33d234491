"""PostgreSQL integration tests for the TradeCustomFields constraints."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta, timezone
import time

import pytest
from sqlalchemy import Engine, func, select, text
from sqlalchemy.exc import DBAPIError

from journal.custom_fields import TradeCustomFieldStore
from journal.db.models import TradeCustomField
from journal.db.session import make_session_factory, session_scope
from journal.errors import ConstraintViolation, ForeignKeyViolation, UniqueConstraintViolation
from tests.utils.journal_fixtures import insert_parents


def test_scenario_duplicate_pair_and_length_bound(pg_engine: Engine) -> None:
    factory = make_session_factory(pg_engine)
    with session_scope(factory) as session:
        parents = insert_parents(session, trades=1, field_names=("risk", "setup", "note"))
    trade_id = parents.trade_ids[0]
    risk_id, setup_id, note_id = parents.field_definition_ids

    with session_scope(factory) as session:
        row = TradeCustomFieldStore(session).add(trade_id, risk_id, "risk:high")
        assert row.id is not None
        assert row.created_at.tzinfo is not None
        assert abs(datetime.now(timezone.utc) - row.created_at) < timedelta(minutes=5)

    with pytest.raises(UniqueConstraintViolation) as excinfo:
        with session_scope(factory) as session:
            TradeCustomFieldStore(session).add(trade_id, risk_id, "risk:low")
    assert excinfo.value.constraint_name == "uq_trade_custom_fields_trade_id_field_definition_id"

    with pytest.raises(ConstraintViolation):
        with session_scope(factory) as session:
            TradeCustomFieldStore(session).add(trade_id, setup_id, "a" * 4001)

    with session_scope(factory) as session:
        TradeCustomFieldStore(session).add(trade_id, setup_id, "a" * 4000)

    with pytest.raises(ForeignKeyViolation):
        with session_scope(factory) as session:
            TradeCustomFieldStore(session).add(trade_id + 1000, note_id, "orphan")


def test_identity_rejects_caller_supplied_id(pg_engine: Engine) -> None:
    factory = make_session_factory(pg_engine)
    with session_scope(factory) as session:
        parents = insert_parents(session, trades=1, field_names=("risk",))

    with pytest.raises(DBAPIError):
        with pg_engine.begin() as conn:
            conn.execute(
                text(
                    'INSERT INTO "TradeCustomFields" ("Id", "TradeId", "FieldDefinitionId", "Value") '
                    "VALUES (12345, :trade_id, :field_definition_id, 'x')"
                ),
                {"trade_id": parents.trade_ids[0], "field_definition_id": parents.field_definition_ids[0]},
            )


def test_upsert_and_trade_delete_cascade(pg_engine: Engine) -> None:
    factory = make_session_factory(pg_engine)
    with session_scope(factory) as session:
        parents = insert_parents(session, trades=1, field_names=("risk",))
    trade_id = parents.trade_ids[0]
    field_id = parents.field_definition_ids[0]

    with session_scope(factory) as session:
        store = TradeCustomFieldStore(session)
        first = store.save_value(trade_id, field_id, "one")
        second = store.save_value(trade_id, field_id, "two")
        assert first.id == second.id
        assert store.get_value(trade_id, field_id) == "two"

    with pg_engine.begin() as conn:
        conn.execute(text('DELETE FROM "Trades" WHERE "Id" = :trade_id'), {"trade_id": trade_id})
        remaining = conn.execute(
            text('SELECT COUNT(*) FROM "TradeCustomFields" WHERE "TradeId" = :trade_id'),
            {"trade_id": trade_id},
        ).scalar_one()
    assert remaining == 0


def test_concurrent_writers_on_same_pair_one_wins(pg_engine: Engine) -> None:
    factory = make_session_factory(pg_engine)
    with session_scope(factory) as session:
        parents = insert_parents(session, trades=1, field_names=("risk",))
    trade_id = parents.trade_ids[0]
    field_id = parents.field_definition_ids[0]

    def _second_writer() -> str:
        with factory() as session:
            try:
                TradeCustomFieldStore(session).add(trade_id, field_id, "second")
                session.commit()
            except UniqueConstraintViolation:
                session.rollback()
                return "rejected"
        return "committed"

    first = factory()
    try:
        TradeCustomFieldStore(first).add(trade_id, field_id, "first")
        with ThreadPoolExecutor(max_workers=1) as pool:
            # The second insert waits on the first writer's uncommitted index entry.
            pending = pool.submit(_second_writer)
            time.sleep(0.2)
            first.commit()
            outcome = pending.result(timeout=30)
    finally:
        first.close()

    assert outcome == "rejected"
    with factory() as session:
        store = TradeCustomFieldStore(session)
        count = session.execute(
            select(func.count()).select_from(TradeCustomField).where(TradeCustomField.trade_id == trade_id)
        ).scalar_one()
        assert count == 1
        assert store.get_value(trade_id, field_id) == "first"
