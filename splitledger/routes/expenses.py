"""
SplitLedger Backend — Expense Route Handlers
=============================================

What:  Expense creation (two variants), listing, and balance-sheet export.

Creation variants:
    POST /api/expenses           shares computed server-side (canonical)
    POST /api/expenses/itemized  client-itemized shares (deprecated; kept
                                 for clients of the first API revision)

Export:
    The CSV is generated into memory per request and returned with an
    attachment Content-Disposition. There is no file on the server.
"""

import logging

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from splitledger.config import settings
from splitledger.database import get_db_session
from splitledger.schemas.common import ErrorResponse
from splitledger.schemas.expense import (
    ExpenseCreate,
    ExpenseCreatedResponse,
    ExpenseListResponse,
    ItemizedExpenseCreate,
)
from splitledger.services.expense_service import expense_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/expenses", tags=["Expenses"])

_create_responses = {
    400: {"description": "Missing field or failed split rule", "model": ErrorResponse},
    404: {"description": "Creator or participant not found", "model": ErrorResponse},
}


@router.post(
    "",
    status_code=201,
    response_model=ExpenseCreatedResponse,
    responses=_create_responses,
    summary="Add an expense",
    description=(
        "Creates an expense and computes each participant's share: 'equal' "
        "participants get amount / N, 'percentage' participants amount * p / 100, "
        "'exact' participants the amount they were given. Percentages may not "
        "total more than 100."
    ),
)
async def create_expense(
    payload: ExpenseCreate,
    db: AsyncSession = Depends(get_db_session),
) -> ExpenseCreatedResponse:
    return await expense_service.create_expense(db, payload)


@router.post(
    "/itemized",
    status_code=201,
    response_model=ExpenseCreatedResponse,
    responses=_create_responses,
    deprecated=True,
    summary="Add an itemized expense (deprecated)",
    description=(
        "Stores participant amounts and percentages exactly as submitted. "
        "Use POST /api/expenses instead."
    ),
)
async def create_itemized_expense(
    payload: ItemizedExpenseCreate,
    db: AsyncSession = Depends(get_db_session),
) -> ExpenseCreatedResponse:
    return await expense_service.create_itemized_expense(db, payload)


@router.get(
    "",
    response_model=ExpenseListResponse,
    responses={404: {"description": "No expenses found", "model": ErrorResponse}},
    summary="List all expenses",
)
async def list_expenses(
    db: AsyncSession = Depends(get_db_session),
) -> ExpenseListResponse:
    return await expense_service.list_all(db)


@router.get(
    "/balance-sheet",
    response_class=Response,
    responses={
        200: {"description": "CSV balance sheet", "content": {"text/csv": {}}},
        404: {"description": "No expenses found", "model": ErrorResponse},
        500: {"description": "CSV generation failed", "model": ErrorResponse},
    },
    summary="Download the balance sheet",
    description="Columns: ExpenseID, CreatedBy, Amount, Participants, CreatedAt.",
)
async def download_balance_sheet(
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    content = await expense_service.export_balance_sheet(db)
    return Response(
        content=content,
        media_type="text/csv",
        headers={
            "Content-Disposition": f'attachment; filename="{settings.export_filename}"',
            # Regenerated on every call
            "Cache-Control": "no-store",
        },
    )
