"""Integrity error taxonomy for the trade journal schema."""

from __future__ import annotations

import logging
import re
from typing import Optional

from sqlalchemy.exc import DataError, IntegrityError

logger = logging.getLogger(__name__)

_PG_UNIQUE_VIOLATION = "23505"
_PG_FOREIGN_KEY_VIOLATION = "23503"
_PG_CHECK_VIOLATION = "23514"
_PG_NOT_NULL_VIOLATION = "23502"
_PG_STRING_DATA_RIGHT_TRUNCATION = "22001"

_SQLITE_CHECK_NAME_RE = re.compile(r"CHECK constraint failed: (\w+)")


class IntegrityViolation(RuntimeError):
    """Database engine rejected a write because of a declared constraint."""

    def __init__(self, message: str, constraint_name: Optional[str] = None) -> None:
        super().__init__(message)
        self.constraint_name = constraint_name


class ConstraintViolation(IntegrityViolation):
    """Column-level rule failed, such as the value length bound."""


class UniqueConstraintViolation(IntegrityViolation):
    """Write would duplicate a (TradeId, FieldDefinitionId) pair."""


class ForeignKeyViolation(IntegrityViolation):
    """Write references a trade or field definition that does not exist."""


def _pg_sqlstate(orig: BaseException) -> Optional[str]:
    return getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)


def _pg_constraint_name(orig: BaseException) -> Optional[str]:
    diag = getattr(orig, "diag", None)
    return getattr(diag, "constraint_name", None) if diag is not None else None


def classify_integrity_error(exc: IntegrityError | DataError) -> Optional[IntegrityViolation]:
    """Map an engine error onto the taxonomy, or return None when unrecognized."""
    orig = exc.orig
    message = str(orig) if orig is not None else str(exc)

    sqlstate = _pg_sqlstate(orig) if orig is not None else None
    if sqlstate is not None:
        constraint_name = _pg_constraint_name(orig)
        if sqlstate == _PG_UNIQUE_VIOLATION:
            return UniqueConstraintViolation(message, constraint_name)
        if sqlstate == _PG_FOREIGN_KEY_VIOLATION:
            return ForeignKeyViolation(message, constraint_name)
        if sqlstate in (_PG_CHECK_VIOLATION, _PG_NOT_NULL_VIOLATION, _PG_STRING_DATA_RIGHT_TRUNCATION):
            return ConstraintViolation(message, constraint_name)
        return None

    if "UNIQUE constraint failed" in message:
        return UniqueConstraintViolation(message)
    if "FOREIGN KEY constraint failed" in message:
        return ForeignKeyViolation(message)
    if "CHECK constraint failed" in message:
        match = _SQLITE_CHECK_NAME_RE.search(message)
        return ConstraintViolation(message, match.group(1) if match else None)
    if "NOT NULL constraint failed" in message:
        return ConstraintViolation(message)
    return None


def translate_integrity_error(exc: IntegrityError | DataError) -> IntegrityViolation:
    """Return the taxonomy error for ``exc``; re-raise ``exc`` when unrecognized."""
    violation = classify_integrity_error(exc)
    if violation is None:
        raise exc
    violation.__cause__ = exc
    return violation
