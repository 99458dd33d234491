"""Data access for per-trade custom field values.

Every rule on ``TradeCustomFields`` is left to the database: the store never
checks for an existing row before writing. Engine rejections surface as
:mod:`journal.errors` types with the engine error chained as the cause.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from contextlib import contextmanager
import logging
from typing import Any, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import DataError, IntegrityError
from sqlalchemy.orm import Session

from journal.db.models import TRADE_ENTITY_TYPE, FieldDefinition, TradeCustomField
from journal.errors import translate_integrity_error

logger = logging.getLogger(__name__)

_UPSERT_INSERTS: dict[str, Any] = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


class TradeCustomFieldStore:
    """Reads and writes ``TradeCustomField`` rows within a caller-owned session.

    The store flushes but never commits. Each write runs inside a SAVEPOINT;
    when the engine rejects it, only that write is undone and the caller's
    other pending work stays in the transaction.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    @contextmanager
    def _translated_errors(self, operation: str) -> Iterator[None]:
        try:
            with self._session.begin_nested():
                yield
        except (IntegrityError, DataError) as exc:
            violation = translate_integrity_error(exc)
            logger.warning(
                "%s rejected by database (%s, constraint=%s).",
                operation,
                type(violation).__name__,
                violation.constraint_name,
            )
            raise violation from exc

    def add(
        self,
        trade_id: int,
        field_definition_id: int,
        value: Optional[str],
        created_at: Any = None,
    ) -> TradeCustomField:
        """Insert a new row; ``Id`` and, when omitted, ``CreatedAt`` come from the engine."""
        row = TradeCustomField(
            trade_id=trade_id,
            field_definition_id=field_definition_id,
            value=value,
        )
        if created_at is not None:
            row.created_at = created_at
        with self._translated_errors("Custom field insert"):
            self._session.add(row)
            self._session.flush()
        return row

    def get(self, custom_field_id: int) -> Optional[TradeCustomField]:
        return self._session.get(TradeCustomField, custom_field_id)

    def get_value(self, trade_id: int, field_definition_id: int) -> Optional[str]:
        stmt = select(TradeCustomField.value).where(
            TradeCustomField.trade_id == trade_id,
            TradeCustomField.field_definition_id == field_definition_id,
        )
        return self._session.execute(stmt).scalar_one_or_none()

    def list_for_trade(self, trade_id: int) -> list[TradeCustomField]:
        stmt = (
            select(TradeCustomField)
            .where(TradeCustomField.trade_id == trade_id)
            .order_by(TradeCustomField.id)
        )
        return list(self._session.execute(stmt).scalars())

    def values_by_field_name(self, trade_id: int) -> dict[str, Optional[str]]:
        """Custom values of a trade keyed by their field definition's name."""
        stmt = (
            select(FieldDefinition.field_name, TradeCustomField.value)
            .join(FieldDefinition, FieldDefinition.id == TradeCustomField.field_definition_id)
            .where(TradeCustomField.trade_id == trade_id)
            .order_by(TradeCustomField.id)
        )
        return {field_name: value for field_name, value in self._session.execute(stmt)}

    def _field_definition_ids(self, user_id: int, field_names: Iterable[str]) -> dict[str, int]:
        stmt = select(FieldDefinition.field_name, FieldDefinition.id).where(
            FieldDefinition.user_id == user_id,
            FieldDefinition.entity_type == TRADE_ENTITY_TYPE,
            FieldDefinition.field_name.in_(list(field_names)),
        )
        return {field_name: field_id for field_name, field_id in self._session.execute(stmt)}

    def _require_field_definition_id(self, user_id: int, field_name: str) -> int:
        field_id = self._field_definition_ids(user_id, (field_name,)).get(field_name)
        if field_id is None:
            raise LookupError(f"Trade field definition {field_name!r} does not exist for user {user_id}.")
        return field_id

    def get_value_by_name(self, user_id: int, trade_id: int, field_name: str) -> Optional[str]:
        """Value of a user's named trade field; ``LookupError`` when the field is undefined."""
        return self.get_value(trade_id, self._require_field_definition_id(user_id, field_name))

    def _require(self, custom_field_id: int) -> TradeCustomField:
        row = self.get(custom_field_id)
        if row is None:
            raise LookupError(f"TradeCustomField {custom_field_id} does not exist.")
        return row

    def update_value(self, custom_field_id: int, value: Optional[str]) -> TradeCustomField:
        row = self._require(custom_field_id)
        with self._translated_errors("Custom field update"):
            row.value = value
            row.updated_at = func.now()
            self._session.flush()
        return row

    def reassign(
        self,
        custom_field_id: int,
        *,
        trade_id: Optional[int] = None,
        field_definition_id: Optional[int] = None,
    ) -> TradeCustomField:
        """Point an existing value at another trade and/or field definition."""
        row = self._require(custom_field_id)
        with self._translated_errors("Custom field reassign"):
            if trade_id is not None:
                row.trade_id = trade_id
            if field_definition_id is not None:
                row.field_definition_id = field_definition_id
            row.updated_at = func.now()
            self._session.flush()
        return row

    def save_value(self, trade_id: int, field_definition_id: int, value: Optional[str]) -> TradeCustomField:
        """Insert or overwrite the value for a (trade, field definition) pair in one statement."""
        dialect_name = self._session.get_bind().dialect.name
        insert = _UPSERT_INSERTS.get(dialect_name)
        if insert is None:
            raise NotImplementedError(f"Upsert is not supported for dialect {dialect_name}.")

        table = TradeCustomField.__table__
        stmt = insert(table).values(
            {
                "TradeId": trade_id,
                "FieldDefinitionId": field_definition_id,
                "Value": value,
            }
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["TradeId", "FieldDefinitionId"],
            set_={"Value": stmt.excluded.Value, "UpdatedAt": func.now()},
        ).returning(table.c.Id)

        with self._translated_errors("Custom field upsert"):
            custom_field_id = self._session.execute(stmt).scalar_one()
        row = self._session.get(TradeCustomField, custom_field_id, populate_existing=True)
        if row is None:
            raise LookupError(f"TradeCustomField {custom_field_id} vanished after upsert.")
        return row

    def save_value_by_name(
        self,
        user_id: int,
        trade_id: int,
        field_name: str,
        value: Optional[str],
    ) -> TradeCustomField:
        """Upsert by field name; ``LookupError`` when the user has no such trade field."""
        return self.save_value(trade_id, self._require_field_definition_id(user_id, field_name), value)

    def replace_for_trade(
        self,
        trade_id: int,
        values: Mapping[int, Optional[str]],
    ) -> list[TradeCustomField]:
        """Replace all values of a trade; ``None`` entries are dropped."""
        with self._translated_errors("Custom field replace"):
            self._session.execute(
                delete(TradeCustomField).where(TradeCustomField.trade_id == trade_id)
            )
            rows = [
                TradeCustomField(
                    trade_id=trade_id,
                    field_definition_id=field_definition_id,
                    value=value,
                )
                for field_definition_id, value in values.items()
                if value is not None
            ]
            self._session.add_all(rows)
            self._session.flush()
        return rows

    def replace_for_trade_by_name(
        self,
        user_id: int,
        trade_id: int,
        values: Mapping[str, Optional[str]],
    ) -> list[TradeCustomField]:
        """Replace all values of a trade keyed by field name; unknown names are skipped."""
        field_ids = self._field_definition_ids(user_id, values)
        skipped = sorted(set(values) - set(field_ids))
        if skipped:
            logger.info("Skipping undefined trade fields for user %s: %s", user_id, skipped)
        return self.replace_for_trade(
            trade_id,
            {field_ids[name]: value for name, value in values.items() if name in field_ids},
        )

    def delete(self, custom_field_id: int) -> bool:
        row = self.get(custom_field_id)
        if row is None:
            return False
        self._session.delete(row)
        self._session.flush()
        return True
