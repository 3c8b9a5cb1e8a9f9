"""Ledger schema — balances and axie holdings.

Revision ID: 001_ledger_schema
Revises: None
Create Date: 2026-10-17

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_ledger_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "balances",
        sa.Column("id", sa.Text, nullable=False),
        sa.Column("balance", sa.BigInteger, nullable=False, server_default="0"),
        sa.PrimaryKeyConstraint("id", name="pk_balances"),
        sa.CheckConstraint("balance >= 0", name="ck_balances_non_negative"),
    )
    op.create_table(
        "axies",
        sa.Column("id", sa.Text, nullable=False),
        sa.Column("axie", sa.BigInteger, nullable=False, server_default="0"),
        sa.PrimaryKeyConstraint("id", name="pk_axies"),
        sa.CheckConstraint("axie >= 0", name="ck_axies_non_negative"),
    )


def downgrade() -> None:
    op.drop_table("axies")
    op.drop_table("balances")
