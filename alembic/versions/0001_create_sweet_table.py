"""Создание таблицы sweet.

Revision ID: 0001
Revises:
Create Date: 2026-10-19 12:00:00.000000

"""

from collections.abc import Sequence

import sqlalchemy as sa
import sqlmodel

from alembic import op  # type: ignore[attr-defined]

revision: str = "0001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "sweet",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sqlmodel.sql.sqltypes.AutoString(length=100), nullable=False),
        sa.Column(
            "category", sqlmodel.sql.sqltypes.AutoString(length=100), nullable=False
        ),
        sa.Column("price", sa.Float(), nullable=False),
        sa.Column("quantity", sa.BigInteger(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("price >= 0", name="ck_sweet_price_non_negative"),
        sa.CheckConstraint("quantity >= 0", name="ck_sweet_quantity_non_negative"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_sweet_name"), "sweet", ["name"], unique=False)
    op.create_index(op.f("ix_sweet_category"), "sweet", ["category"], unique=False)
    op.create_index(op.f("ix_sweet_created_at"), "sweet", ["created_at"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_sweet_created_at"), table_name="sweet")
    op.drop_index(op.f("ix_sweet_category"), table_name="sweet")
    op.drop_index(op.f("ix_sweet_name"), table_name="sweet")
    op.drop_table("sweet")
