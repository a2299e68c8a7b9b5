"""
SplitLedger Backend — Services Layer
=====================================

What:  Business logic between routes (HTTP) and the database.
How:   Services receive an AsyncSession per call and return response schemas
       or raise application exceptions.

Service Inventory:
    - UserService:    Account Directory (register, lookup, reference checks)
    - ExpenseService: Expense Ledger (create, list, export)
    - split_policy:   Pure owed-amount / percentage computation
    - balance_sheet:  Pure CSV projection of the ledger
"""
