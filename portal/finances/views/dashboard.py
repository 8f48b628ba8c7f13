"""
finances/views/dashboard.py
───────────────────────────
Admin overview computed from the loaded state.
"""

from django.shortcuts import render
from django.utils import timezone

from accounts.access import page_required

from ..services import dashboard_figures


@page_required('dashboard')
def dashboard_view(req):
    """
    Headline counts, money collected / spent / balance, this month's takings,
    per-type and per-category totals, class sizes and the latest payments.
    """
    today = timezone.localdate()
    context = dashboard_figures(req.state, today)
    context['today'] = today
    return render(req, 'finances/dashboard.html', context)
