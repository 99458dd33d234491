"""Trade journal persistence: custom-field schema, migrations and data access."""

from __future__ import annotations

import logging

from journal.custom_fields import TradeCustomFieldStore
from journal.errors import (
    ConstraintViolation,
    ForeignKeyViolation,
    IntegrityViolation,
    UniqueConstraintViolation,
)

logger = logging.getLogger(__name__)

__all__ = [
    "ConstraintViolation",
    "ForeignKeyViolation",
    "IntegrityViolation",
    "TradeCustomFieldStore",
    "UniqueConstraintViolation",
]
