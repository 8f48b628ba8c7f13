"""
finances/urls.py
────────────────
URL patterns for the finances app (dashboard, payments, expenses).
Include in the root urls.py with:
    path('', include('finances.urls')),
"""

from django.urls import path

from . import views

urlpatterns = [
    path('dashboard/', views.dashboard_view, name='dashboard'),

    # Payments
    path('payments/',                         views.payment_list_view,    name='payment_list'),
    path('payments/new/',                     views.payment_create_view,  name='payment_create'),
    path('payments/receipt/dismiss/',         views.receipt_dismiss_view, name='payment_receipt_dismiss'),
    path('payments/<str:payment_id>/edit/',   views.payment_edit_view,    name='payment_edit'),
    path('payments/<str:payment_id>/delete/', views.payment_delete_view,  name='payment_delete'),

    # Expenses
    path('expenses/',                         views.expense_list_view,    name='expense_list'),
    path('expenses/new/',                     views.expense_form_view,    name='expense_create'),
    path('expenses/<str:expense_id>/edit/',   views.expense_form_view,    name='expense_edit'),
    path('expenses/<str:expense_id>/delete/', views.expense_delete_view,  name='expense_delete'),
]
