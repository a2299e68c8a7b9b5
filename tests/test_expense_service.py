"""
SplitLedger Backend — Expense Service Tests
============================================

What:  Expense creation (both variants), listings, and balance-sheet export.
How:   Users are registered through UserService on the in-memory database;
       failure paths use the mock session.
"""

import csv
import io
from decimal import Decimal
from uuid import uuid4

import pytest

from splitledger.exceptions import InternalError, NotFoundError, ValidationError
from splitledger.schemas.expense import ExpenseCreate, ItemizedExpenseCreate
from splitledger.services.expense_service import ExpenseService


def expense_payload(creator_id, participants, amount="100", username=None):
    return ExpenseCreate(
        user_id=creator_id,
        username=username,
        amount=Decimal(amount),
        participants=participants,
    )


class TestCreateExpense:

    def setup_method(self):
        self.service = ExpenseService()

    @pytest.mark.asyncio
    async def test_equal_split_between_two(self, db_session, register_user):
        alice = await register_user("Alice")
        bob = await register_user("Bobby")

        created = await self.service.create_expense(
            db_session,
            expense_payload(alice, [{"user_id": alice, "type": "equal"}, {"user_id": bob, "type": "equal"}]),
        )

        (expense,) = await self.service.find_all(db_session)
        assert expense.id == created.expense_id
        assert [p.amount_owed for p in expense.participants] == [Decimal("50"), Decimal("50")]
        assert [p.percentage for p in expense.participants] == [Decimal("50"), Decimal("50")]

    @pytest.mark.asyncio
    async def test_display_names_come_from_directory(self, db_session, register_user):
        alice = await register_user("Alice")
        bob = await register_user("Bobby")

        await self.service.create_expense(
            db_session,
            expense_payload(alice, [{"user_id": bob, "type": "equal"}]),
        )

        (expense,) = await self.service.find_all(db_session)
        assert expense.creator_name == "Alice"
        assert expense.participants[0].username == "Bobby"

    @pytest.mark.asyncio
    async def test_supplied_display_names_are_kept(self, db_session, register_user):
        alice = await register_user("Alice")

        await self.service.create_expense(
            db_session,
            expense_payload(alice, [{"user_id": alice, "username": "Ali", "type": "equal"}], username="A."),
        )

        (expense,) = await self.service.find_all(db_session)
        assert expense.creator_name == "A."
        assert expense.participants[0].username == "Ali"

    @pytest.mark.asyncio
    async def test_percentage_over_100_rejected_and_nothing_stored(self, db_session, register_user):
        alice = await register_user("Alice")
        bob = await register_user("Bobby")

        with pytest.raises(ValidationError, match="exceeds 100%"):
            await self.service.create_expense(
                db_session,
                expense_payload(
                    alice,
                    [
                        {"user_id": alice, "type": "percentage", "percentage": "30"},
                        {"user_id": bob, "type": "percentage", "percentage": "80"},
                    ],
                    amount="200",
                ),
            )

        assert await self.service.find_all(db_session) == []

    @pytest.mark.asyncio
    async def test_exact_participant_keeps_percentage_unset(self, db_session, register_user):
        alice = await register_user("Alice")

        await self.service.create_expense(
            db_session,
            expense_payload(alice, [{"user_id": alice, "type": "exact", "amount_owed": "90"}], amount="90"),
        )

        (expense,) = await self.service.find_all(db_session)
        assert expense.participants[0].amount_owed == Decimal("90")
        assert expense.participants[0].percentage is None

    @pytest.mark.asyncio
    async def test_unknown_creator(self, db_session, register_user):
        bob = await register_user("Bobby")

        with pytest.raises(NotFoundError, match="User not found"):
            await self.service.create_expense(
                db_session,
                expense_payload(uuid4(), [{"user_id": bob, "type": "equal"}]),
            )

    @pytest.mark.asyncio
    async def test_unknown_participant(self, db_session, register_user):
        alice = await register_user("Alice")
        ghost = uuid4()

        with pytest.raises(NotFoundError, match=str(ghost)):
            await self.service.create_expense(
                db_session,
                expense_payload(alice, [{"user_id": alice, "type": "equal"}, {"user_id": ghost, "type": "equal"}]),
            )

    @pytest.mark.asyncio
    async def test_database_failure_becomes_internal_error(self, mock_db_session):
        mock_db_session.execute.side_effect = RuntimeError("connection lost")

        with pytest.raises(InternalError):
            await self.service.create_expense(
                mock_db_session,
                expense_payload(uuid4(), [{"user_id": uuid4(), "type": "equal"}]),
            )


class TestCreateItemizedExpense:

    def setup_method(self):
        self.service = ExpenseService()

    @pytest.mark.asyncio
    async def test_client_figures_stored_as_is(self, db_session, register_user):
        alice = await register_user("Alice")
        bob = await register_user("Bobby")

        await self.service.create_itemized_expense(
            db_session,
            ItemizedExpenseCreate(
                user_id=alice,
                username="Alice",
                amount=Decimal("100"),
                participants=[
                    {"user_id": alice, "username": "Alice", "type": "percentage", "percentage": "70"},
                    {"user_id": bob, "username": "Bobby", "type": "percentage", "percentage": "70"},
                ],
            ),
        )

        (expense,) = await self.service.find_all(db_session)
        assert [p.percentage for p in expense.participants] == [Decimal("70"), Decimal("70")]
        assert all(p.amount_owed is None for p in expense.participants)

    @pytest.mark.asyncio
    async def test_exact_without_amount_rejected(self, db_session, register_user):
        alice = await register_user("Alice")

        with pytest.raises(ValidationError, match="exact"):
            await self.service.create_itemized_expense(
                db_session,
                ItemizedExpenseCreate(
                    user_id=alice,
                    username="Alice",
                    amount=Decimal("10"),
                    participants=[{"user_id": alice, "username": "Alice", "type": "exact"}],
                ),
            )

    @pytest.mark.asyncio
    async def test_out_of_range_figures_rejected_for_any_type(self, db_session, register_user):
        alice = await register_user("Alice")

        with pytest.raises(ValidationError, match="must not be negative"):
            await self.service.create_itemized_expense(
                db_session,
                ItemizedExpenseCreate(
                    user_id=alice,
                    username="Alice",
                    amount=Decimal("100"),
                    participants=[
                        {
                            "user_id": alice,
                            "username": "Alice",
                            "type": "equal",
                            "amount_owed": "-50",
                            "percentage": "250",
                        }
                    ],
                ),
            )

        assert await self.service.find_all(db_session) == []

    @pytest.mark.asyncio
    async def test_percentage_out_of_range_rejected(self, db_session, register_user):
        alice = await register_user("Alice")

        with pytest.raises(ValidationError, match="0-100"):
            await self.service.create_itemized_expense(
                db_session,
                ItemizedExpenseCreate(
                    user_id=alice,
                    username="Alice",
                    amount=Decimal("100"),
                    participants=[
                        {"user_id": alice, "username": "Alice", "type": "percentage", "percentage": "150"}
                    ],
                ),
            )

    @pytest.mark.asyncio
    async def test_unknown_participant(self, db_session, register_user):
        alice = await register_user("Alice")
        ghost = uuid4()

        with pytest.raises(NotFoundError, match=str(ghost)):
            await self.service.create_itemized_expense(
                db_session,
                ItemizedExpenseCreate(
                    user_id=alice,
                    username="Alice",
                    amount=Decimal("10"),
                    participants=[{"user_id": ghost, "username": "Ghost", "type": "equal"}],
                ),
            )


class TestListing:

    def setup_method(self):
        self.service = ExpenseService()

    @pytest.mark.asyncio
    async def test_user_sees_expenses_as_creator_or_participant(self, db_session, register_user):
        alice = await register_user("Alice")
        bob = await register_user("Bobby")
        carol = await register_user("Carol")

        await self.service.create_expense(db_session, expense_payload(alice, [{"user_id": bob, "type": "equal"}]))
        await self.service.create_expense(db_session, expense_payload(carol, [{"user_id": alice, "type": "equal"}]))
        await self.service.create_expense(db_session, expense_payload(carol, [{"user_id": bob, "type": "equal"}]))

        alice_view = await self.service.list_for_user(db_session, alice)
        bob_view = await self.service.list_for_user(db_session, bob)

        assert len(alice_view.expenses) == 2
        assert len(bob_view.expenses) == 2
        assert alice_view.message == "Expenses retrieved successfully"

    @pytest.mark.asyncio
    async def test_uninvolved_user_gets_no_expenses_found(self, db_session, register_user):
        alice = await register_user("Alice")
        bob = await register_user("Bobby")
        outsider = await register_user("Dave")
        await self.service.create_expense(db_session, expense_payload(alice, [{"user_id": bob, "type": "equal"}]))

        with pytest.raises(NotFoundError, match="No expenses found"):
            await self.service.list_for_user(db_session, outsider)

    @pytest.mark.asyncio
    async def test_unknown_user_listing(self, db_session):
        with pytest.raises(NotFoundError, match="User not found"):
            await self.service.list_for_user(db_session, uuid4())

    @pytest.mark.asyncio
    async def test_list_all_empty(self, db_session):
        with pytest.raises(NotFoundError, match="No expenses found"):
            await self.service.list_all(db_session)

    @pytest.mark.asyncio
    async def test_list_all_database_failure(self, mock_db_session):
        mock_db_session.execute.side_effect = RuntimeError("connection lost")

        with pytest.raises(InternalError):
            await self.service.list_all(mock_db_session)


class TestExport:

    def setup_method(self):
        self.service = ExpenseService()

    @pytest.mark.asyncio
    async def test_export_row_contents(self, db_session, register_user):
        alice = await register_user("Alice")
        bob = await register_user("Bob")
        created = await self.service.create_expense(
            db_session,
            expense_payload(alice, [{"user_id": bob, "type": "equal"}], amount="60"),
        )

        content = await self.service.export_balance_sheet(db_session)

        (row,) = list(csv.DictReader(io.StringIO(content)))
        assert row["ExpenseID"] == str(created.expense_id)
        assert row["CreatedBy"] == "Alice"
        assert row["Amount"] == "60"
        assert row["Participants"] == "Bob (equal)"
        assert row["CreatedAt"].count("/") == 2

    @pytest.mark.asyncio
    async def test_export_is_repeatable(self, db_session, register_user):
        alice = await register_user("Alice")
        await self.service.create_expense(db_session, expense_payload(alice, [{"user_id": alice, "type": "equal"}]))

        first = await self.service.export_balance_sheet(db_session)
        second = await self.service.export_balance_sheet(db_session)

        assert first == second

    @pytest.mark.asyncio
    async def test_export_empty_ledger(self, db_session):
        with pytest.raises(NotFoundError):
            await self.service.export_balance_sheet(db_session)

    @pytest.mark.asyncio
    async def test_export_render_failure(self, db_session, register_user, monkeypatch):
        alice = await register_user("Alice")
        await self.service.create_expense(db_session, expense_payload(alice, [{"user_id": alice, "type": "equal"}]))

        def broken(rows):
            raise RuntimeError("encoder blew up")

        monkeypatch.setattr("splitledger.services.balance_sheet.render_csv", broken)

        with pytest.raises(InternalError, match="Failed to generate CSV"):
            await self.service.export_balance_sheet(db_session)
