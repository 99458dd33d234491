"""Trade custom field value model."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKeyConstraint,
    Identity,
    Index,
    Integer,
    PrimaryKeyConstraint,
    String,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from journal.db.base import Base

if TYPE_CHECKING:
    from journal.db.models.field_definition import FieldDefinition
    from journal.db.models.trade import Trade

logger = logging.getLogger(__name__)

VALUE_MAX_LENGTH = 4000


class TradeCustomField(Base):
    """One value recorded for one field definition on one trade.

    ``Id`` and ``CreatedAt`` are produced by the database; a trade holds at
    most one value per field definition, enforced by a unique index.
    """

    __tablename__ = "TradeCustomFields"
    __table_args__ = (
        PrimaryKeyConstraint("Id", name="pk_trade_custom_fields"),
        ForeignKeyConstraint(
            ["TradeId"],
            ["Trades.Id"],
            name="fk_trade_custom_fields_trade",
            ondelete="CASCADE",
        ),
        ForeignKeyConstraint(
            ["FieldDefinitionId"],
            ["FieldDefinitions.Id"],
            name="fk_trade_custom_fields_field_definition",
            ondelete="CASCADE",
        ),
        CheckConstraint(
            f'length("Value") <= {VALUE_MAX_LENGTH}',
            name="ck_trade_custom_fields_value_length",
        ),
        Index(
            "uq_trade_custom_fields_trade_id_field_definition_id",
            "TradeId",
            "FieldDefinitionId",
            unique=True,
        ),
    )
    __mapper_args__ = {"eager_defaults": True}

    id: Mapped[int] = mapped_column(
        "Id",
        Integer,
        Identity(always=True),
        primary_key=True,
    )
    trade_id: Mapped[int] = mapped_column("TradeId", Integer, nullable=False)
    field_definition_id: Mapped[int] = mapped_column(
        "FieldDefinitionId",
        Integer,
        nullable=False,
    )
    value: Mapped[str | None] = mapped_column("Value", String(VALUE_MAX_LENGTH))
    created_at: Mapped[datetime] = mapped_column(
        "CreatedAt",
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime | None] = mapped_column("UpdatedAt", DateTime(timezone=True))

    trade: Mapped["Trade"] = relationship(back_populates="custom_fields")
    field_definition: Mapped["FieldDefinition"] = relationship(
        back_populates="trade_custom_fields",
    )
