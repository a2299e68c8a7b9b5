"""
SplitLedger Backend — Application Package Initializer
=====================================================

What: Marks the `splitledger` directory as a Python package.
Who:  Imported by uvicorn (`splitledger.main:app`), Alembic and pytest.

Architecture Note:
    The backend is split into layers:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← Validation, split policy, export
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Explicit async engine handle
    └─────────────────────────────────────┘

    Services never touch request/response objects, so the Account Directory
    and the Expense Ledger can be exercised directly against a session.
"""

__version__ = "1.0.0"
