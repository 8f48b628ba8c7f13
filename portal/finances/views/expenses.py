"""
finances/views/expenses.py
──────────────────────────
Expense log: list for every role, create / edit / delete for admins.
New expenses are stamped with the id of the user who logged them.
"""

from django.conf import settings
from django.contrib import messages
from django.shortcuts import redirect, render

from accounts.access import page_required
from accounts.navigation import can_edit
from records import repository
from records.errors import StoreError
from records.models import ExpenseCategory
from records.views import delete_record, save_record

from ..forms import ExpenseForm


def _category_label(category):
    if category in ExpenseCategory.values:
        return ExpenseCategory(category).label
    return category or '-'


@page_required('expenses')
def expense_list_view(req):
    state = req.state
    rows = [
        {
            'record':         e,
            'category_label': _category_label(e.get('category')),
            'logged_by':      state.username(e.get('user_id')),
        }
        for e in sorted(state.expenses, key=lambda e: str(e.get('date', '')), reverse=True)
    ]
    return render(req, 'finances/expense_list.html', {
        'rows':     rows,
        'can_edit': can_edit(req.console_user['role']),
    })


@page_required('expenses', edit=True)
def expense_form_view(req, expense_id=None):
    """
    GET  /expenses/new/        — blank form, date defaults to today
    GET  /expenses/<id>/edit/  — pre-filled form
    POST                       — validate, save, back to the list
    """
    instance = None
    if expense_id:
        instance = req.state.find('expenses', expense_id)
        if instance is None:
            messages.error(req, 'Expense not found.')
            return redirect('expense_list')

    if req.method == 'POST':
        form = ExpenseForm(req.POST, state=req.state, instance=instance)
        if form.is_valid():
            if instance:
                saved = save_record(req, form, repository.expenses, instance, 'Expense')
            else:
                saved = _add_expense(req, form)
            if saved:
                return redirect('expense_list')
        else:
            messages.error(req, 'Please fix the errors below.')
    else:
        form = ExpenseForm(state=req.state, instance=instance)

    return render(req, 'records/record_form.html', {
        'form':       form,
        'instance':   instance,
        'title':      'Edit expense' if instance else 'New expense',
        'cancel_url': 'expense_list',
    })


def _add_expense(req, form):
    document = {**form.to_document(), 'user_id': req.console_user['id']}
    try:
        repository.expenses.add(document)
    except StoreError as exc:
        messages.error(req, str(exc))
        return False
    messages.success(req, '✅ Expense added successfully.')
    return True


@page_required('expenses', edit=True)
def expense_delete_view(req, expense_id):
    expense = req.state.find('expenses', expense_id)
    if expense is None:
        messages.error(req, 'Expense not found.')
        return redirect('expense_list')

    if req.method == 'POST':
        delete_record(req, repository.expenses, expense_id, 'Expense')
        return redirect('expense_list')

    return render(req, 'records/confirm_delete.html', {
        'title':      'Delete expense',
        'message':    f'Are you sure you want to delete the expense "{expense.get("description", "")}" '
                      f'({expense.get("amount", "")} {settings.CURRENCY})?',
        'cancel_url': 'expense_list',
    })
