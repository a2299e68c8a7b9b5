"""
SplitLedger Backend — Balance Sheet Rendering
==============================================

What:  Projects expenses into balance-sheet rows and renders them as CSV.
How:   Pure functions. The CSV is written into an in-memory buffer and
       returned as text; nothing touches the filesystem.
Who:   ExpenseService.export_balance_sheet().

Row format:
    ExpenseID    expense UUID
    CreatedBy    creator display name captured at creation
    Amount       total without trailing zeros ("60", "60.5")
    Participants "<name> (<type>)" joined by ", "
    CreatedAt    creation date as M/D/YYYY, no time component

Every cell, header included, is wrapped in double quotes, as the
balance sheets exported by earlier releases were.
"""

import csv
import io
from datetime import datetime
from decimal import Decimal
from typing import Dict, Iterable, List

from splitledger.models.expense import Expense

FIELDS = ["ExpenseID", "CreatedBy", "Amount", "Participants", "CreatedAt"]


def format_amount(value: Decimal) -> str:
    """Render a Decimal the way a plain number prints: 60.00 → "60"."""
    return format(Decimal(value).normalize(), "f")


def format_locale_date(value: datetime) -> str:
    """en-US short date without zero padding, e.g. 10/9/2026."""
    return f"{value.month}/{value.day}/{value.year}"


def describe_participants(expense: Expense) -> str:
    return ", ".join(f"{p.username} ({p.split_type})" for p in expense.participants)


def build_rows(expenses: Iterable[Expense]) -> List[Dict[str, str]]:
    return [
        {
            "ExpenseID": str(expense.id),
            "CreatedBy": expense.creator_name,
            "Amount": format_amount(expense.amount),
            "Participants": describe_participants(expense),
            "CreatedAt": format_locale_date(expense.created_at),
        }
        for expense in expenses
    ]


def render_csv(rows: List[Dict[str, str]]) -> str:
    """Write rows (with a header line) into a string buffer."""
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=FIELDS, lineterminator="\n", quoting=csv.QUOTE_ALL)
    writer.writeheader()
    writer.writerows(rows)
    return buffer.getvalue()
