"""
SplitLedger Backend — Split Policy
===================================

What:  Computes every participant's owed amount and percentage for an expense.
How:   Pure functions over Decimal values; no database, no I/O. Input entries
       are never mutated; a new `ComputedShare` is returned per entry, in the
       same order.
Who:   Called by ExpenseService before an expense is persisted.

Rules:
    exact        amount_owed supplied, >= 0; percentage stays unset
    percentage   percentage supplied, within [0, 100];
                 amount_owed = amount * percentage / 100
    equal        amount_owed = amount / N, percentage = 100 / N, where N is the
                 number of participants in the WHOLE expense
    The percentages of 'percentage' participants may not sum past 100.
    Any supplied amount_owed is >= 0 and any supplied percentage within
    [0, 100], whatever the participant's type.

    The owed amounts are NOT reconciled against the total: a mix of split
    types may allocate less or more than `amount` and is stored as computed.

Rounding:
    Computed amounts and percentages are quantized to 2 decimal places
    (ROUND_HALF_UP), matching the Numeric(12, 2) / Numeric(5, 2) columns.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, List, Optional, Sequence

from splitledger.exceptions import ValidationError
from splitledger.schemas.expense import SplitType

TWO_PLACES = Decimal("0.01")
HUNDRED = Decimal("100")


@dataclass(frozen=True)
class ComputedShare:
    """Final figures for one participant."""
    split_type: SplitType
    amount_owed: Decimal
    percentage: Optional[Decimal]


def quantize(value: Decimal) -> Decimal:
    return value.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def validate_entry(entry: Any) -> None:
    """
    Check the split-type specific fields of one participant entry.

    `entry` is anything exposing `user_id`, `type`, `percentage` and
    `amount_owed` (the participant request schemas do).

    Whatever the split type, a supplied amount_owed must be non-negative and
    a supplied percentage must lie in [0, 100].

    Raises:
        ValidationError: exact without a non-negative amount_owed,
                         percentage without a percentage in [0, 100], or
                         an out-of-range value on any participant
    """
    split_type = SplitType(entry.type)
    user_ref = getattr(entry, "user_id", None)

    if split_type is SplitType.EXACT:
        if entry.amount_owed is None or entry.amount_owed < 0:
            raise ValidationError(
                message=f"Valid amount_owed is required for participant {user_ref} with type 'exact'",
                field="participants",
                context={"user_id": str(user_ref)},
            )
    elif split_type is SplitType.PERCENTAGE:
        if entry.percentage is None or not (0 <= entry.percentage <= 100):
            raise ValidationError(
                message=(
                    f"Valid percentage (0-100) is required for participant {user_ref} "
                    f"with type 'percentage'"
                ),
                field="participants",
                context={"user_id": str(user_ref)},
            )

    if entry.amount_owed is not None and entry.amount_owed < 0:
        raise ValidationError(
            message=f"amount_owed must not be negative for participant {user_ref}",
            field="participants",
            context={"user_id": str(user_ref)},
        )
    if entry.percentage is not None and not (0 <= entry.percentage <= 100):
        raise ValidationError(
            message=f"percentage must be between 0 and 100 for participant {user_ref}",
            field="participants",
            context={"user_id": str(user_ref)},
        )


def total_percentage(entries: Sequence[Any]) -> Decimal:
    """Sum of the percentages declared by 'percentage' participants."""
    return sum(
        (Decimal(e.percentage) for e in entries if SplitType(e.type) is SplitType.PERCENTAGE),
        Decimal("0"),
    )


def apply_split_policy(amount: Decimal, entries: Sequence[Any]) -> List[ComputedShare]:
    """
    Compute owed amounts and percentages for every participant.

    Args:
        amount:   Positive expense total
        entries:  Ordered participant entries (see `validate_entry`)

    Returns:
        One ComputedShare per entry, in input order.

    Raises:
        ValidationError: empty participant list, a malformed entry, or
                         'percentage' participants totalling more than 100%
    """
    if not entries:
        raise ValidationError(message="At least one participant is required", field="participants")

    amount = Decimal(amount)

    for entry in entries:
        validate_entry(entry)

    pct_total = total_percentage(entries)
    if pct_total > HUNDRED:
        raise ValidationError(
            message="Total percentage exceeds 100%",
            field="participants",
            context={"total_percentage": str(pct_total)},
        )

    count = len(entries)
    equal_amount = quantize(amount / count)
    equal_percentage = quantize(HUNDRED / count)

    shares: List[ComputedShare] = []
    for entry in entries:
        split_type = SplitType(entry.type)
        if split_type is SplitType.EXACT:
            shares.append(ComputedShare(split_type, quantize(Decimal(entry.amount_owed)), None))
        elif split_type is SplitType.PERCENTAGE:
            percentage = Decimal(entry.percentage)
            shares.append(
                ComputedShare(split_type, quantize(amount * percentage / HUNDRED), quantize(percentage))
            )
        else:
            shares.append(ComputedShare(split_type, equal_amount, equal_percentage))
    return shares
