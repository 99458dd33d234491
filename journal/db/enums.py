"""Enum contracts for the trade journal schema."""

from __future__ import annotations

import enum
import logging

from sqlalchemy import Enum as SAEnum

logger = logging.getLogger(__name__)


class FieldType(str, enum.Enum):
    """Value kind described by a custom field definition."""

    TEXT = "TEXT"
    INTEGER = "INTEGER"
    DECIMAL = "DECIMAL"
    DATE = "DATE"
    DATETIME = "DATETIME"
    TIME = "TIME"
    BOOLEAN = "BOOLEAN"
    SELECT = "SELECT"
    MULTI_SELECT = "MULTI_SELECT"
    TEXT_AREA = "TEXT_AREA"
    RATING = "RATING"
    COLOR = "COLOR"
    IMAGE = "IMAGE"
    URL = "URL"
    PERCENTAGE = "PERCENTAGE"


field_type_enum = SAEnum(FieldType, name="field_type_enum")
