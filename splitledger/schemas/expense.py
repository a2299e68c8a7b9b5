"""
SplitLedger Backend — Expense Request/Response Schemas
=======================================================

What:  Pydantic models for the expense endpoints.

Two creation payloads exist:
    ExpenseCreate          → POST /api/expenses (computed split, canonical).
                             Display names are optional and filled from the
                             user directory; owed amounts are computed.
    ItemizedExpenseCreate  → POST /api/expenses/itemized (deprecated).
                             Every name is required and owed amounts /
                             percentages are stored exactly as submitted.

Split-specific rules (exact needs amount_owed, percentage needs a [0, 100]
percentage, total percentage <= 100) are checked by the services, not here,
so both payloads report them with the same messages. Digit limits are
enforced here and match the Numeric(12, 2) / Numeric(5, 2) columns.
"""

import enum
import uuid
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field


class SplitType(str, enum.Enum):
    """How a participant's share is determined."""
    EQUAL = "equal"
    EXACT = "exact"
    PERCENTAGE = "percentage"


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class ParticipantInput(BaseModel):
    user_id: uuid.UUID = Field(description="Participant's user id")
    username: Optional[str] = Field(
        default=None,
        min_length=1,
        max_length=120,
        description="Display name; looked up from the user directory when omitted",
    )
    type: SplitType = Field(description="Split policy: equal, exact or percentage")
    percentage: Optional[Decimal] = Field(
        default=None,
        max_digits=5,
        decimal_places=2,
        description="Share in percent; required for 'percentage' participants",
    )
    amount_owed: Optional[Decimal] = Field(
        default=None,
        max_digits=12,
        decimal_places=2,
        description="Owed amount; required for 'exact' participants",
    )

    model_config = {"extra": "forbid"}


class ExpenseCreate(BaseModel):
    """Payload for the computed-split variant."""
    user_id: uuid.UUID = Field(description="Creator's user id")
    username: Optional[str] = Field(
        default=None,
        min_length=1,
        max_length=120,
        description="Creator display name; looked up when omitted",
    )
    amount: Decimal = Field(gt=0, max_digits=12, decimal_places=2, description="Total expense amount")
    participants: List[ParticipantInput] = Field(min_length=1)

    model_config = {"extra": "forbid"}


class ItemizedParticipantInput(BaseModel):
    user_id: uuid.UUID
    username: str = Field(min_length=1, max_length=120)
    type: SplitType
    percentage: Optional[Decimal] = Field(default=None, max_digits=5, decimal_places=2)
    amount_owed: Optional[Decimal] = Field(default=None, max_digits=12, decimal_places=2)

    model_config = {"extra": "forbid"}


class ItemizedExpenseCreate(BaseModel):
    """Payload for the deprecated client-itemized variant."""
    user_id: uuid.UUID
    username: str = Field(min_length=1, max_length=120)
    amount: Decimal = Field(gt=0, max_digits=12, decimal_places=2)
    participants: List[ItemizedParticipantInput] = Field(min_length=1)

    model_config = {"extra": "forbid"}


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class ExpenseCreatedResponse(BaseModel):
    """Returned by both creation endpoints with HTTP 201."""
    message: str = Field(default="Expense added successfully")
    expense_id: uuid.UUID


class ParticipantResponse(BaseModel):
    user_id: uuid.UUID
    username: str
    type: SplitType
    amount_owed: Optional[Decimal] = None
    percentage: Optional[Decimal] = None


class ExpenseResponse(BaseModel):
    """
    Full representation of a stored expense.

    `user_id` / `username` identify the creator, mirroring the creation
    payload.
    """
    id: uuid.UUID
    user_id: uuid.UUID
    username: str
    amount: Decimal
    participants: List[ParticipantResponse]
    created_at: datetime


class ExpenseListResponse(BaseModel):
    message: str
    expenses: List[ExpenseResponse]
