"""Trade custom field schema: trades, field definitions and per-trade values."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

from alembic import op
import sqlalchemy as sa

logger = logging.getLogger(__name__)

# revision identifiers, used by Alembic.
revision: str = "0001_trade_custom_fields"
down_revision: str | None = None
branch_labels: Sequence[str] | None = None
depends_on: Sequence[str] | None = None


FIELD_TYPE_VALUES: tuple[str, ...] = (
    "TEXT",
    "INTEGER",
    "DECIMAL",
    "DATE",
    "DATETIME",
    "TIME",
    "BOOLEAN",
    "SELECT",
    "MULTI_SELECT",
    "TEXT_AREA",
    "RATING",
    "COLOR",
    "IMAGE",
    "URL",
    "PERCENTAGE",
)

VALUE_MAX_LENGTH = 4000

Step = tuple[str, Callable[[], None]]


def _field_type_enum() -> sa.Enum:
    return sa.Enum(*FIELD_TYPE_VALUES, name="field_type_enum")


def _run_all(steps: Sequence[Step]) -> None:
    for label, action in steps:
        try:
            logger.info("Running migration step: %s", label)
            action()
        except Exception:
            logger.exception("Migration step failed.")
            raise


def _create_trades() -> None:
    op.create_table(
        "Trades",
        sa.Column("Id", sa.Integer(), sa.Identity(always=True), nullable=False),
        sa.Column("Symbol", sa.String(length=20), nullable=False),
        sa.Column("EntryTime", sa.DateTime(timezone=True), nullable=False),
        sa.Column("IsDeleted", sa.Boolean(), nullable=False, server_default=sa.text("FALSE")),
        sa.Column("CreatedAt", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("Id", name="pk_trades"),
    )
    op.create_index("idx_trades_symbol", "Trades", ["Symbol"])


def _create_field_definitions() -> None:
    op.create_table(
        "FieldDefinitions",
        sa.Column("Id", sa.Integer(), sa.Identity(always=True), nullable=False),
        sa.Column("UserId", sa.Integer(), nullable=False),
        sa.Column("EntityType", sa.String(length=50), nullable=False, server_default=sa.text("'Trade'")),
        sa.Column("FieldName", sa.String(length=50), nullable=False),
        sa.Column("DisplayName", sa.String(length=100), nullable=False),
        sa.Column("FieldType", _field_type_enum(), nullable=False, server_default="TEXT"),
        sa.Column("IsRequired", sa.Boolean(), nullable=False, server_default=sa.text("FALSE")),
        sa.Column("IsActive", sa.Boolean(), nullable=False, server_default=sa.text("TRUE")),
        sa.Column("CreatedAt", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("Id", name="pk_field_definitions"),
        sa.UniqueConstraint("UserId", "FieldName", name="uq_field_definitions_user_id_field_name"),
    )


def _create_trade_custom_fields() -> None:
    op.create_table(
        "TradeCustomFields",
        sa.Column("Id", sa.Integer(), sa.Identity(always=True), nullable=False),
        sa.Column("TradeId", sa.Integer(), nullable=False),
        sa.Column("FieldDefinitionId", sa.Integer(), nullable=False),
        sa.Column("Value", sa.String(length=VALUE_MAX_LENGTH), nullable=True),
        sa.Column("CreatedAt", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("UpdatedAt", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("Id", name="pk_trade_custom_fields"),
        sa.ForeignKeyConstraint(
            ["TradeId"],
            ["Trades.Id"],
            name="fk_trade_custom_fields_trade",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["FieldDefinitionId"],
            ["FieldDefinitions.Id"],
            name="fk_trade_custom_fields_field_definition",
            ondelete="CASCADE",
        ),
        sa.CheckConstraint(
            f'length("Value") <= {VALUE_MAX_LENGTH}',
            name="ck_trade_custom_fields_value_length",
        ),
    )
    op.create_index(
        "uq_trade_custom_fields_trade_id_field_definition_id",
        "TradeCustomFields",
        ["TradeId", "FieldDefinitionId"],
        unique=True,
    )


def _drop_field_type_enum() -> None:
    _field_type_enum().drop(op.get_bind(), checkfirst=True)


UPGRADE_STEPS: tuple[Step, ...] = (
    ("create Trades", _create_trades),
    ("create FieldDefinitions", _create_field_definitions),
    ("create TradeCustomFields", _create_trade_custom_fields),
)

DOWNGRADE_STEPS: tuple[Step, ...] = (
    (
        "drop TradeCustomFields index",
        lambda: op.drop_index("uq_trade_custom_fields_trade_id_field_definition_id", table_name="TradeCustomFields"),
    ),
    ("drop TradeCustomFields", lambda: op.drop_table("TradeCustomFields")),
    ("drop FieldDefinitions", lambda: op.drop_table("FieldDefinitions")),
    ("drop field_type_enum", _drop_field_type_enum),
    ("drop Trades index", lambda: op.drop_index("idx_trades_symbol", table_name="Trades")),
    ("drop Trades", lambda: op.drop_table("Trades")),
)


def upgrade() -> None:
    logger.info("Starting trade custom field schema migration.")
    _run_all(UPGRADE_STEPS)
    logger.info("Completed trade custom field schema migration.")


def downgrade() -> None:
    logger.info("Starting trade custom field schema migration downgrade.")
    _run_all(DOWNGRADE_STEPS)
    logger.info("Completed trade custom field schema migration downgrade.")
