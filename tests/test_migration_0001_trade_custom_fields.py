"""Unit tests for the trade custom field Alembic revision."""

from __future__ import annotations

import importlib.util
from pathlib import Path
import sys
from typing import Any

import pytest
from sqlalchemy import inspect

from journal.db.migrate import current_revision, downgrade, upgrade
from journal.db.session import create_journal_engine


MIGRATION_PATH = (
    Path(__file__).resolve().parents[1]
    / "journal"
    / "db"
    / "migrations"
    / "versions"
    / "0001_trade_custom_fields.py"
)


def _load_migration_module(module_name: str) -> Any:
    spec = importlib.util.spec_from_file_location(module_name, MIGRATION_PATH)
    assert spec is not None and spec.loader is not None
    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    spec.loader.exec_module(module)
    return module


def test_revision_metadata_constants() -> None:
    module = _load_migration_module("migration_0001_meta")
    assert module.revision == "0001_trade_custom_fields"
    assert module.down_revision is None
    assert module.branch_labels is None
    assert module.depends_on is None


def test_run_all_runs_steps_in_order_and_empty() -> None:
    module = _load_migration_module("migration_0001_run_all")
    calls: list[str] = []

    module._run_all((("first", lambda: calls.append("first")), ("second", lambda: calls.append("second"))))
    assert calls == ["first", "second"]

    calls.clear()
    module._run_all(())
    assert calls == []


def test_run_all_logs_and_reraises(monkeypatch: pytest.MonkeyPatch) -> None:
    module = _load_migration_module("migration_0001_run_all_error")
    calls: list[str] = []

    def _fail() -> None:
        raise RuntimeError("forced migration failure")

    seen: list[str] = []
    monkeypatch.setattr(module.logger, "exception", lambda message: seen.append(message))
    with pytest.raises(RuntimeError, match="forced migration failure"):
        module._run_all((("ok", lambda: calls.append("ok")), ("boom", _fail), ("never", lambda: calls.append("never"))))

    assert calls == ["ok"]
    assert seen == ["Migration step failed."]


def test_upgrade_and_downgrade_step_order(monkeypatch: pytest.MonkeyPatch) -> None:
    module = _load_migration_module("migration_0001_order")

    groups: list[tuple[str, ...]] = []
    monkeypatch.setattr(module, "_run_all", lambda steps: groups.append(tuple(label for label, _ in steps)))
    module.upgrade()
    module.downgrade()

    assert groups[0] == ("create Trades", "create FieldDefinitions", "create TradeCustomFields")
    assert groups[1][0] == "drop TradeCustomFields index"
    assert groups[1][-1] == "drop Trades"


def test_upgrade_then_downgrade_round_trip(tmp_path: Path) -> None:
    url = f"sqlite:///{tmp_path / 'journal.db'}"
    engine = create_journal_engine(url)
    try:
        upgrade(url)
        with engine.connect() as conn:
            assert current_revision(conn) == "0001_trade_custom_fields"
            tables = set(inspect(conn).get_table_names())
        assert {"Trades", "FieldDefinitions", "TradeCustomFields", "alembic_version"} <= tables

        downgrade(url)
        with engine.connect() as conn:
            assert current_revision(conn) is None
            remaining = set(inspect(conn).get_table_names()) - {"alembic_version"}
        assert remaining == set()
    finally:
        engine.dispose()
