"""
SplitLedger Backend — User Route Handlers
==========================================

What:  Registration, user lookup, and the per-user expense listing.
How:   Validates path/body via FastAPI + Pydantic, delegates to services.
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from splitledger.database import get_db_session
from splitledger.schemas.common import ErrorResponse
from splitledger.schemas.expense import ExpenseListResponse
from splitledger.schemas.user import UserCreate, UserCreatedResponse, UserResponse
from splitledger.services.expense_service import expense_service
from splitledger.services.user_service import user_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["Users"])


@router.post(
    "",
    status_code=201,
    response_model=UserCreatedResponse,
    responses={
        400: {"description": "Missing or malformed field", "model": ErrorResponse},
        409: {"description": "Email or mobile number already exists", "model": ErrorResponse},
    },
    summary="Register a user",
)
async def register_user(
    payload: UserCreate,
    db: AsyncSession = Depends(get_db_session),
) -> UserCreatedResponse:
    """The password is stored only as a salted bcrypt hash."""
    return await user_service.register(db, payload)


@router.get(
    "/{user_id}",
    response_model=UserResponse,
    responses={
        404: {"description": "User not found", "model": ErrorResponse},
    },
    summary="Get a user by ID",
)
async def get_user(
    user_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> UserResponse:
    return await user_service.get_user(db, user_id)


@router.get(
    "/{user_id}/expenses",
    response_model=ExpenseListResponse,
    responses={
        404: {"description": "User not found, or no expenses for this user", "model": ErrorResponse},
    },
    summary="List a user's expenses",
    description="Expenses the user created or participates in, oldest first.",
)
async def list_user_expenses(
    user_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> ExpenseListResponse:
    return await expense_service.list_for_user(db, user_id)
