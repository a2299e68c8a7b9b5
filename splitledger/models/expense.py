"""
SplitLedger Backend — Expense SQLAlchemy Models
================================================

What:  ORM models for `expenses` and their embedded `expense_participants`.
Who:   Used by ExpenseService and by Alembic.

Table Design:
    - creator_id / participant user_id reference users by id WITHOUT a
      foreign key. References are validated when the expense is written and
      never enforced afterwards.
    - Participants belong to exactly one expense (FK + cascade) and keep
      their submission order through the `position` column.
    - Monetary values are Numeric(12, 2); percentages Numeric(5, 2).

Query Patterns:
    - Expenses for a user: creator_id = :uid OR id IN (participants of :uid)
      → idx_expenses_creator_id + idx_expense_participants_user_id
    - All expenses for export: ORDER BY created_at
"""

import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import (
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Uuid,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from splitledger.database import Base


class Expense(Base):
    """
    A shared expense created by one user and split across participants.

    Lifecycle:
        Created once; immutable; never deleted.
    """

    __tablename__ = "expenses"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    creator_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)

    # Display name captured at creation time
    creator_name: Mapped[str] = mapped_column(String(120), nullable=False)

    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    # selectin: participants are always needed with the expense and async
    # sessions cannot lazy-load on attribute access.
    participants: Mapped[List["ExpenseParticipant"]] = relationship(
        back_populates="expense",
        cascade="all, delete-orphan",
        order_by="ExpenseParticipant.position",
        lazy="selectin",
    )

    __table_args__ = (
        Index("idx_expenses_creator_id", "creator_id"),
        Index("idx_expenses_created_at", "created_at"),
    )

    def __repr__(self) -> str:
        return (
            f"<Expense(id={self.id}, creator='{self.creator_name}', "
            f"amount={self.amount}, participants={len(self.participants)})>"
        )


class ExpenseParticipant(Base):
    """One participant's share of an expense."""

    __tablename__ = "expense_participants"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    expense_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("expenses.id", ondelete="CASCADE"),
        nullable=False,
    )

    # Submission order within the expense (0-based)
    position: Mapped[int] = mapped_column(Integer, nullable=False)

    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)

    username: Mapped[str] = mapped_column(String(120), nullable=False)

    # 'equal' | 'exact' | 'percentage'
    split_type: Mapped[str] = mapped_column(String(20), nullable=False)

    amount_owed: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(12, 2),
        nullable=True,
    )

    # NULL for 'exact' participants
    percentage: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(5, 2),
        nullable=True,
    )

    expense: Mapped[Expense] = relationship(back_populates="participants")

    __table_args__ = (
        Index("idx_expense_participants_user_id", "user_id"),
        Index("idx_expense_participants_expense_id", "expense_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<ExpenseParticipant(user_id={self.user_id}, type='{self.split_type}', "
            f"amount_owed={self.amount_owed}, percentage={self.percentage})>"
        )
