"""Declarative base shared by the Trades, FieldDefinitions and TradeCustomFields mappings."""

from __future__ import annotations

import logging

from sqlalchemy import MetaData
from sqlalchemy.orm import DeclarativeBase

logger = logging.getLogger(__name__)

metadata = MetaData()


class Base(DeclarativeBase):
    """Every journal table registers on ``metadata``, which Alembic diffs against."""

    metadata = metadata
