"""
SplitLedger Backend — API Routes Package
=========================================

Route Inventory:
    - users.py:     POST /api/users                    (register)
                    GET  /api/users/{user_id}          (lookup)
                    GET  /api/users/{user_id}/expenses (expenses as creator or participant)
    - expenses.py:  POST /api/expenses                 (computed split)
                    POST /api/expenses/itemized        (deprecated, client-itemized)
                    GET  /api/expenses                 (all expenses)
                    GET  /api/expenses/balance-sheet   (CSV download)
    - health.py:    GET  /                             (banner)
                    GET  /health                       (service health)

Routes stay thin: parse the request, call a service, shape the response.
"""
