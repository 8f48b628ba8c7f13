"""
finances/services.py
────────────────────
Pure helpers over the loaded ConsoleState: payment history search, payment
receipts and the dashboard figures.  Nothing here talks to the store.

Functions
─────────
filter_payments(state, search, payment_type)
    Payments whose student matches *search* (case-insensitive substring of
    last name, first name or registration number) AND whose type equals
    *payment_type*; newest first.

payment_details(payment)
    Human-readable detail column: "March 2026" for monthly payments, the
    description for uniforms, "-" otherwise.

build_receipt(payment, state)
    Receipt shown after a payment is saved, with a temporary receipt number
    and a QR code of its summary.

dashboard_figures(state, today)
    Totals, per-type / per-category breakdowns and recent payments.
"""

import base64
import calendar
import io
import time
from collections import OrderedDict
from decimal import Decimal

import qrcode

from records.models import ExpenseCategory, PaymentType
from records.state import UNRESOLVED


def _amount(record):
    try:
        return Decimal(str(record.get('amount', 0) or 0))
    except ArithmeticError:
        return Decimal(0)


def type_label(payment_type):
    if payment_type in PaymentType.values:
        return PaymentType(payment_type).label
    return payment_type or UNRESOLVED


def month_label(month):
    """'2026-03' → 'March 2026'; anything unparseable is returned unchanged."""
    try:
        year, number = (int(part) for part in month.split('-'))
        return f"{calendar.month_name[number]} {year}"
    except (AttributeError, ValueError, IndexError):
        return month


def payment_details(payment):
    if payment.get('type') == PaymentType.MONTHLY and payment.get('month'):
        return month_label(payment['month'])
    if payment.get('type') == PaymentType.UNIFORM and payment.get('description'):
        return payment['description']
    return UNRESOLVED


# ── Payment history ───────────────────────────────────────────────────────────

def _student_matches(student, needle):
    if not needle:
        return True
    haystacks = (
        student.get('last_name', ''),
        student.get('first_name', ''),
        student.get('registration_number', ''),
    )
    return any(needle in str(value).lower() for value in haystacks)


def filter_payments(state, search='', payment_type=''):
    """
    Payments joined with their student, filtered by search AND type, newest
    first.  Payments whose student no longer resolves are left out.
    """
    needle = (search or '').strip().lower()
    rows = []
    for payment in state.payments:
        student = state.student(payment.get('student_id'))
        if student is None:
            continue
        if not _student_matches(student, needle):
            continue
        if payment_type and payment.get('type') != payment_type:
            continue
        rows.append({
            'payment':    payment,
            'student':    student,
            'type_label': type_label(payment.get('type')),
            'details':    payment_details(payment),
        })
    rows.sort(key=lambda row: str(row['payment'].get('date', '')), reverse=True)
    return rows


# ── Receipts ──────────────────────────────────────────────────────────────────

def temporary_receipt_id():
    """Receipt number derived from the current time in milliseconds."""
    return str(int(time.time() * 1000))


def receipt_qr(text, box_size=4):
    """Return *text* as a base64-encoded PNG QR code for <img src="data:...">."""
    qr = qrcode.QRCode(
        version=None,
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=box_size,
        border=2,
    )
    qr.add_data(text)
    qr.make(fit=True)

    img = qr.make_image(fill_color="#1a1a2e", back_color="white")
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return base64.b64encode(buf.getvalue()).decode("utf-8")


def build_receipt(payment, student, school_name, currency):
    """
    Receipt dict kept in the session until dismissed.  The receipt number is
    local to the receipt; it is not the id the store assigned to the payment.
    """
    receipt_id = temporary_receipt_id()
    student_name = UNRESOLVED
    registration = ''
    if student:
        student_name = f"{student.get('last_name', '')} {student.get('first_name', '')}".strip()
        registration = student.get('registration_number', '')

    summary = (
        f"{school_name} | Receipt {receipt_id} | {payment.get('date', '')} | "
        f"{student_name} ({registration}) | {type_label(payment.get('type'))} | "
        f"{payment.get('amount')} {currency}"
    )
    return {
        'id':           receipt_id,
        'date':         str(payment.get('date', '')),
        'student_name': student_name,
        'registration': registration,
        'type_label':   type_label(payment.get('type')),
        'details':      payment_details(payment),
        'amount':       str(payment.get('amount', '')),
        'qr_base64':    receipt_qr(summary),
    }


# ── Dashboard ─────────────────────────────────────────────────────────────────

def dashboard_figures(state, today):
    """
    Every number on the dashboard, computed from the loaded state:

        total_collected / total_spent / balance
        collected_this_month          – payments dated in today's month
        by_payment_type               – {label: total} in PaymentType order
        by_expense_category           – {label: total} in ExpenseCategory order
        students_per_class            – [(class, count)] sorted by type, name
        recent_payments               – five newest payment rows
    """
    total_collected = sum((_amount(p) for p in state.payments), Decimal(0))
    total_spent = sum((_amount(e) for e in state.expenses), Decimal(0))

    this_month = today.strftime('%Y-%m')
    collected_this_month = sum(
        (_amount(p) for p in state.payments if str(p.get('date', '')).startswith(this_month)),
        Decimal(0),
    )

    by_payment_type = OrderedDict((label, Decimal(0)) for label in PaymentType.labels)
    for p in state.payments:
        label = type_label(p.get('type'))
        by_payment_type[label] = by_payment_type.get(label, Decimal(0)) + _amount(p)

    by_expense_category = OrderedDict((label, Decimal(0)) for label in ExpenseCategory.labels)
    for e in state.expenses:
        category = e.get('category')
        label = ExpenseCategory(category).label if category in ExpenseCategory.values else (category or UNRESOLVED)
        by_expense_category[label] = by_expense_category.get(label, Decimal(0)) + _amount(e)

    students_per_class = [
        (c, len(state.students_in_class(c['id'])))
        for c in sorted(state.classes, key=lambda c: (c.get('type', ''), c.get('name', '')))
    ]

    return {
        'student_count':        len(state.students),
        'teacher_count':        len(state.teachers),
        'class_count':          len(state.classes),
        'total_collected':      total_collected,
        'total_spent':          total_spent,
        'balance':              total_collected - total_spent,
        'collected_this_month': collected_this_month,
        'by_payment_type':      by_payment_type,
        'by_expense_category':  by_expense_category,
        'students_per_class':   students_per_class,
        'recent_payments':      filter_payments(state)[:5],
    }
