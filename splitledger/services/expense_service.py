"""
SplitLedger Backend — Expense Service (Expense Ledger)
=======================================================

What:  Creates, lists and exports expenses.
How:   Stateless; composes UserService (reference validation), the split
       policy (owed amounts) and balance_sheet (CSV projection).
Who:   Called by the expenses and users routers.

Creation Flow (POST /api/expenses):
    ┌──────────┐    ┌─────────────┐    ┌──────────────┐    ┌──────────┐
    │ Validate │───▶│  Validate   │───▶│ Split policy │───▶│  Store   │
    │ creator  │    │ participants│    │ (amounts, %) │    │  (DB)    │
    └──────────┘    └─────────────┘    └──────────────┘    └──────────┘

    Any failure raises before anything is added to the session, so a
    rejected expense leaves no rows behind.

Variants:
    create_expense()           canonical; amounts computed server-side
    create_itemized_expense()  deprecated; client-supplied amounts stored as-is
"""

import logging
import uuid
from typing import Dict, List, Sequence

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from splitledger.exceptions import InternalError, NotFoundError, SplitLedgerError
from splitledger.models.expense import Expense, ExpenseParticipant
from splitledger.models.user import User
from splitledger.schemas.expense import (
    ExpenseCreate,
    ExpenseCreatedResponse,
    ExpenseListResponse,
    ExpenseResponse,
    ItemizedExpenseCreate,
    ParticipantResponse,
)
from splitledger.services import balance_sheet
from splitledger.services.split_policy import apply_split_policy, validate_entry
from splitledger.services.user_service import user_service

logger = logging.getLogger(__name__)


class ExpenseService:
    """
    Expense Ledger operations.

    Error Handling Strategy:
        Application exceptions (ValidationError, NotFoundError) propagate
        unchanged. Anything else is logged with its stack trace and wrapped in
        InternalError so no database detail reaches the client.
    """

    async def _require_creator(self, db: AsyncSession, user_id: uuid.UUID) -> User:
        creator = await user_service.find_by_id(db, user_id)
        if creator is None:
            raise NotFoundError(resource="user", resource_id=str(user_id), message="User not found")
        return creator

    async def _require_participants(
        self, db: AsyncSession, user_ids: Sequence[uuid.UUID]
    ) -> Dict[uuid.UUID, User]:
        users = await user_service.get_users(db, user_ids)
        for user_id in user_ids:
            if user_id not in users:
                raise NotFoundError(
                    resource="participant",
                    resource_id=str(user_id),
                    message=f"Participant userId {user_id} not found",
                )
        return users

    async def create_expense(self, db: AsyncSession, payload: ExpenseCreate) -> ExpenseCreatedResponse:
        """
        Create an expense whose shares are computed by the split policy.

        Display names missing from the payload are taken from the user
        directory at creation time.

        Raises:
            NotFoundError:   creator or a participant does not exist
            ValidationError: split policy rejected the participants
            InternalError:   database failure
        """
        try:
            creator = await self._require_creator(db, payload.user_id)
            users = await self._require_participants(db, [p.user_id for p in payload.participants])

            shares = apply_split_policy(payload.amount, payload.participants)

            expense = Expense(
                creator_id=creator.id,
                creator_name=payload.username or creator.name,
                amount=payload.amount,
                participants=[
                    ExpenseParticipant(
                        position=position,
                        user_id=entry.user_id,
                        username=entry.username or users[entry.user_id].name,
                        split_type=share.split_type.value,
                        amount_owed=share.amount_owed,
                        percentage=share.percentage,
                    )
                    for position, (entry, share) in enumerate(zip(payload.participants, shares))
                ],
            )
            db.add(expense)
            await db.flush()
            logger.info(
                "Expense %s created by %s: amount=%s participants=%d",
                expense.id,
                creator.id,
                expense.amount,
                len(expense.participants),
            )
            return ExpenseCreatedResponse(expense_id=expense.id)

        except SplitLedgerError:
            raise
        except Exception as e:
            logger.error("Unexpected error creating expense: %s", str(e), exc_info=True)
            raise InternalError(context={"error_type": type(e).__name__})

    async def create_itemized_expense(
        self, db: AsyncSession, payload: ItemizedExpenseCreate
    ) -> ExpenseCreatedResponse:
        """
        Deprecated: store an expense exactly as itemized by the client.

        Each participant is checked for existence and for the fields its
        split type needs, but owed amounts are not computed and the total
        percentage is not checked.
        """
        try:
            creator = await self._require_creator(db, payload.user_id)
            await self._require_participants(db, [p.user_id for p in payload.participants])
            for entry in payload.participants:
                validate_entry(entry)

            expense = Expense(
                creator_id=creator.id,
                creator_name=payload.username,
                amount=payload.amount,
                participants=[
                    ExpenseParticipant(
                        position=position,
                        user_id=entry.user_id,
                        username=entry.username,
                        split_type=entry.type.value,
                        amount_owed=entry.amount_owed,
                        percentage=entry.percentage,
                    )
                    for position, entry in enumerate(payload.participants)
                ],
            )
            db.add(expense)
            await db.flush()
            logger.info("Itemized expense %s created by %s", expense.id, creator.id)
            return ExpenseCreatedResponse(expense_id=expense.id)

        except SplitLedgerError:
            raise
        except Exception as e:
            logger.error("Unexpected error creating itemized expense: %s", str(e), exc_info=True)
            raise InternalError(context={"error_type": type(e).__name__})

    # ── Queries ───────────────────────────────────────────────────────────

    async def find_by_participant(self, db: AsyncSession, user_id: uuid.UUID) -> List[Expense]:
        """Every expense the user created or takes part in, oldest first."""
        involved = select(ExpenseParticipant.expense_id).where(ExpenseParticipant.user_id == user_id)
        result = await db.execute(
            select(Expense)
            .where(or_(Expense.creator_id == user_id, Expense.id.in_(involved)))
            .order_by(Expense.created_at, Expense.id)
        )
        return list(result.scalars().all())

    async def find_all(self, db: AsyncSession) -> List[Expense]:
        result = await db.execute(select(Expense).order_by(Expense.created_at, Expense.id))
        return list(result.scalars().all())

    async def list_for_user(self, db: AsyncSession, user_id: uuid.UUID) -> ExpenseListResponse:
        """
        Raises:
            NotFoundError: unknown user, or the user has no expenses
        """
        try:
            if not await user_service.exists(db, user_id):
                raise NotFoundError(resource="user", resource_id=str(user_id), message="User not found")

            expenses = await self.find_by_participant(db, user_id)
            if not expenses:
                raise NotFoundError(resource="expense", message="No expenses found for this user")

            return ExpenseListResponse(
                message="Expenses retrieved successfully",
                expenses=[self.to_response(e) for e in expenses],
            )

        except NotFoundError:
            raise
        except Exception as e:
            logger.error("Database error listing expenses for %s: %s", user_id, str(e), exc_info=True)
            raise InternalError(
                message="Could not retrieve expenses. Please try again.",
                context={"user_id": str(user_id)},
            )

    async def list_all(self, db: AsyncSession) -> ExpenseListResponse:
        try:
            expenses = await self.find_all(db)
            if not expenses:
                raise NotFoundError(resource="expense", message="No expenses found")

            return ExpenseListResponse(
                message="Successfully fetched all the expenses",
                expenses=[self.to_response(e) for e in expenses],
            )

        except NotFoundError:
            raise
        except Exception as e:
            logger.error("Database error listing all expenses: %s", str(e), exc_info=True)
            raise InternalError(message="Could not retrieve expenses. Please try again.")

    async def export_balance_sheet(self, db: AsyncSession) -> str:
        """
        Render the whole ledger as CSV text.

        The sheet is rebuilt from the database on every call; two calls with
        no writes in between return identical text.

        Raises:
            NotFoundError: the ledger is empty
            InternalError: the query or CSV generation failed
        """
        try:
            expenses = await self.find_all(db)
        except Exception as e:
            logger.error("Error retrieving balance sheet: %s", str(e), exc_info=True)
            raise InternalError()

        if not expenses:
            raise NotFoundError(resource="expense", message="No expenses found")

        try:
            content = balance_sheet.render_csv(balance_sheet.build_rows(expenses))
        except Exception as e:
            logger.error("Error while generating CSV: %s", str(e), exc_info=True)
            raise InternalError(message="Failed to generate CSV")

        logger.info("Balance sheet exported: %d expenses", len(expenses))
        return content

    @staticmethod
    def to_response(expense: Expense) -> ExpenseResponse:
        return ExpenseResponse(
            id=expense.id,
            user_id=expense.creator_id,
            username=expense.creator_name,
            amount=expense.amount,
            participants=[
                ParticipantResponse(
                    user_id=p.user_id,
                    username=p.username,
                    type=p.split_type,
                    amount_owed=p.amount_owed,
                    percentage=p.percentage,
                )
                for p in expense.participants
            ],
            created_at=expense.created_at,
        )


expense_service = ExpenseService()
