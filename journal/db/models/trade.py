"""Trade parent model definitions."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import (
    Boolean,
    DateTime,
    Identity,
    Index,
    Integer,
    PrimaryKeyConstraint,
    String,
    func,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from journal.db.base import Base

if TYPE_CHECKING:
    from journal.db.models.trade_custom_field import TradeCustomField

logger = logging.getLogger(__name__)


class Trade(Base):
    """Journaled trade that owns per-trade custom field values."""

    __tablename__ = "Trades"
    __table_args__ = (
        PrimaryKeyConstraint("Id", name="pk_trades"),
        Index("idx_trades_symbol", "Symbol"),
    )

    id: Mapped[int] = mapped_column(
        "Id",
        Integer,
        Identity(always=True),
        primary_key=True,
    )
    symbol: Mapped[str] = mapped_column("Symbol", String(20), nullable=False)
    entry_time: Mapped[datetime] = mapped_column(
        "EntryTime",
        DateTime(timezone=True),
        nullable=False,
    )
    is_deleted: Mapped[bool] = mapped_column(
        "IsDeleted",
        Boolean,
        nullable=False,
        server_default=text("FALSE"),
    )
    created_at: Mapped[datetime] = mapped_column(
        "CreatedAt",
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    custom_fields: Mapped[list["TradeCustomField"]] = relationship(
        back_populates="trade",
        cascade="all",
        passive_deletes=True,
    )
