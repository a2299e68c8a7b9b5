"""Create users, expenses and expense_participants tables

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Initial schema for the Account Directory and the Expense Ledger.
How:   Portable column types (Uuid, DateTime with time zone, Numeric) so the
       same migration runs on PostgreSQL and SQLite.

Note: expenses.creator_id and expense_participants.user_id carry no foreign
key to users; references are validated when an expense is written.
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(120), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("mobile_number", sa.String(10), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
        sa.UniqueConstraint("mobile_number"),
    )

    op.create_table(
        "expenses",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("creator_id", sa.Uuid(), nullable=False),
        sa.Column("creator_name", sa.String(120), nullable=False),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_expenses_creator_id", "expenses", ["creator_id"])
    op.create_index("idx_expenses_created_at", "expenses", ["created_at"])

    op.create_table(
        "expense_participants",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("expense_id", sa.Uuid(), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("username", sa.String(120), nullable=False),
        sa.Column("split_type", sa.String(20), nullable=False),
        sa.Column("amount_owed", sa.Numeric(12, 2), nullable=True),
        sa.Column("percentage", sa.Numeric(5, 2), nullable=True),
        sa.ForeignKeyConstraint(["expense_id"], ["expenses.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_expense_participants_user_id", "expense_participants", ["user_id"])
    op.create_index("idx_expense_participants_expense_id", "expense_participants", ["expense_id"])


def downgrade() -> None:
    """Drop all tables. Destructive: every user and expense is lost."""
    op.drop_index("idx_expense_participants_expense_id", table_name="expense_participants")
    op.drop_index("idx_expense_participants_user_id", table_name="expense_participants")
    op.drop_table("expense_participants")
    op.drop_index("idx_expenses_created_at", table_name="expenses")
    op.drop_index("idx_expenses_creator_id", table_name="expenses")
    op.drop_table("expenses")
    op.drop_table("users")
