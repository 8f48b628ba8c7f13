"""
finances/views/
───────────────
Split into sub-modules for clarity:
  payments.py  – payment form, receipt and searchable history
  expenses.py  – expense log CRUD
  dashboard.py – admin overview figures
"""
from .dashboard import dashboard_view
from .expenses import expense_delete_view, expense_form_view, expense_list_view
from .payments import (
    payment_create_view,
    payment_delete_view,
    payment_edit_view,
    payment_list_view,
    receipt_dismiss_view,
)

__all__ = [
    # dashboard
    'dashboard_view',
    # payments
    'payment_list_view',
    'payment_create_view',
    'payment_edit_view',
    'payment_delete_view',
    'receipt_dismiss_view',
    # expenses
    'expense_list_view',
    'expense_form_view',
    'expense_delete_view',
]
