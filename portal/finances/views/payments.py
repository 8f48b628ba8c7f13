"""
finances/views/payments.py
──────────────────────────
Payments page: the new-payment form (admins), the receipt of the last payment
and the searchable payment history.

The receipt lives in the session under RECEIPT_SESSION_KEY until the user
dismisses it, so it survives the redirect that follows a successful save.
"""

from django.conf import settings
from django.contrib import messages
from django.shortcuts import redirect, render

from accounts.access import page_required, require_POST_or_405
from accounts.navigation import can_edit
from records import repository
from records.errors import StoreError
from records.models import PaymentType
from records.views import delete_record, save_record

from ..forms import PaymentForm
from ..services import build_receipt, filter_payments

RECEIPT_SESSION_KEY = 'payment_receipt'


def _payment_page(req, form):
    search = req.GET.get('q', '').strip()
    payment_type = req.GET.get('type', '')
    if payment_type not in PaymentType.values:
        payment_type = ''

    return render(req, 'finances/payment_list.html', {
        'form':          form,
        'rows':          filter_payments(req.state, search, payment_type),
        'search':        search,
        'payment_type':  payment_type,
        'payment_types': PaymentType.choices,
        'receipt':       req.session.get(RECEIPT_SESSION_KEY),
        'can_edit':      can_edit(req.console_user['role']),
    })


@page_required('payments')
def payment_list_view(req):
    """
    GET /payments/?q=<text>&type=<payment type>

    History filtered by the student search AND the payment type, newest
    first.  Admins also get a blank payment form.
    """
    form = PaymentForm(state=req.state) if can_edit(req.console_user['role']) else None
    return _payment_page(req, form)


@page_required('payments', edit=True)
@require_POST_or_405
def payment_create_view(req):
    """Validate and store a payment, then show its receipt."""
    form = PaymentForm(req.POST, state=req.state)
    if not form.is_valid():
        messages.error(req, 'Please fix the errors below.')
        return _payment_page(req, form)

    document = form.to_document()
    try:
        repository.payments.add(document)
    except StoreError as exc:
        messages.error(req, str(exc))
        return _payment_page(req, form)

    student = req.state.student(document['student_id'])
    req.session[RECEIPT_SESSION_KEY] = build_receipt(
        repository.PaymentRepository.narrow(repository.clean_payload(document)),
        student,
        settings.SCHOOL_NAME,
        settings.CURRENCY,
    )
    messages.success(req, '✅ Payment recorded successfully.')
    return redirect('payment_list')


@page_required('payments')
@require_POST_or_405
def receipt_dismiss_view(req):
    req.session.pop(RECEIPT_SESSION_KEY, None)
    return redirect('payment_list')


@page_required('payments', edit=True)
def payment_edit_view(req, payment_id):
    instance = req.state.find('payments', payment_id)
    if instance is None:
        messages.error(req, 'Payment not found.')
        return redirect('payment_list')

    if req.method == 'POST':
        form = PaymentForm(req.POST, state=req.state, instance=instance)
        if form.is_valid():
            if save_record(req, form, repository.payments, instance, 'Payment'):
                return redirect('payment_list')
        else:
            messages.error(req, 'Please fix the errors below.')
    else:
        form = PaymentForm(state=req.state, instance=instance)

    return render(req, 'records/record_form.html', {
        'form':       form,
        'instance':   instance,
        'title':      'Edit payment',
        'cancel_url': 'payment_list',
    })


@page_required('payments', edit=True)
def payment_delete_view(req, payment_id):
    payment = req.state.find('payments', payment_id)
    if payment is None:
        messages.error(req, 'Payment not found.')
        return redirect('payment_list')

    student_name = req.state.student_name(payment.get('student_id'))
    if req.method == 'POST':
        delete_record(req, repository.payments, payment_id, 'Payment')
        return redirect('payment_list')

    return render(req, 'records/confirm_delete.html', {
        'title':      'Delete payment',
        'message':    f'Are you sure you want to delete the payment of {payment.get("amount", "")} '
                      f'{settings.CURRENCY} for {student_name} dated {payment.get("date", "")}?',
        'cancel_url': 'payment_list',
    })
