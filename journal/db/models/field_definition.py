"""Custom field definition model."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import (
    Boolean,
    DateTime,
    Identity,
    Integer,
    PrimaryKeyConstraint,
    String,
    UniqueConstraint,
    func,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from journal.db.base import Base
from journal.db.enums import FieldType, field_type_enum

if TYPE_CHECKING:
    from journal.db.models.trade_custom_field import TradeCustomField

logger = logging.getLogger(__name__)

TRADE_ENTITY_TYPE = "Trade"


class FieldDefinition(Base):
    """User-defined field that gives a custom value its name and kind."""

    __tablename__ = "FieldDefinitions"
    __table_args__ = (
        PrimaryKeyConstraint("Id", name="pk_field_definitions"),
        UniqueConstraint("UserId", "FieldName", name="uq_field_definitions_user_id_field_name"),
    )

    id: Mapped[int] = mapped_column(
        "Id",
        Integer,
        Identity(always=True),
        primary_key=True,
    )
    user_id: Mapped[int] = mapped_column("UserId", Integer, nullable=False)
    entity_type: Mapped[str] = mapped_column(
        "EntityType",
        String(50),
        nullable=False,
        server_default=text("'Trade'"),
    )
    field_name: Mapped[str] = mapped_column("FieldName", String(50), nullable=False)
    display_name: Mapped[str] = mapped_column("DisplayName", String(100), nullable=False)
    field_type: Mapped[FieldType] = mapped_column(
        "FieldType",
        field_type_enum,
        nullable=False,
        server_default=FieldType.TEXT.value,
    )
    is_required: Mapped[bool] = mapped_column(
        "IsRequired",
        Boolean,
        nullable=False,
        server_default=text("FALSE"),
    )
    is_active: Mapped[bool] = mapped_column(
        "IsActive",
        Boolean,
        nullable=False,
        server_default=text("TRUE"),
    )
    created_at: Mapped[datetime] = mapped_column(
        "CreatedAt",
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    trade_custom_fields: Mapped[list["TradeCustomField"]] = relationship(
        back_populates="field_definition",
        cascade="all",
        passive_deletes=True,
    )
