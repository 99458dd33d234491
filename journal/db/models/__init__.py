"""Model module imports for SQLAlchemy metadata registration."""

from __future__ import annotations

import logging

from journal.db.models.field_definition import TRADE_ENTITY_TYPE, FieldDefinition
from journal.db.models.trade import Trade
from journal.db.models.trade_custom_field import VALUE_MAX_LENGTH, TradeCustomField

logger = logging.getLogger(__name__)

__all__ = [
    "FieldDefinition",
    "Trade",
    "TradeCustomField",
    "TRADE_ENTITY_TYPE",
    "VALUE_MAX_LENGTH",
]
