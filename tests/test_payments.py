import base64
import datetime

import pytest

from finances.services import (
    build_receipt,
    dashboard_figures,
    filter_payments,
    month_label,
    payment_details,
)
from finances.views.payments import RECEIPT_SESSION_KEY
from records import repository
from records.state import load_state

pytestmark = pytest.mark.django_db


# ── History search and filter ─────────────────────────────────────────────────

def _dates(rows):
    return [row['payment']['date'] for row in rows]


def test_history_is_sorted_newest_first(school):
    assert _dates(filter_payments(load_state())) == ['2026-03-01', '2026-02-05', '2026-01-10']


@pytest.mark.parametrize('search, expected', [
    ('diallo', ['2026-03-01', '2026-01-10']),
    ('AWA',    ['2026-03-01', '2026-01-10']),
    ('r-002',  ['2026-02-05']),
    ('ous',    ['2026-02-05']),
    ('nobody', []),
])
def test_search_matches_student_name_or_registration(school, search, expected):
    assert _dates(filter_payments(load_state(), search=search)) == expected


def test_search_and_type_filter_combine(school):
    state = load_state()
    assert _dates(filter_payments(state, search='diallo', payment_type='uniform')) == ['2026-03-01']
    assert _dates(filter_payments(state, search='ndiaye', payment_type='uniform')) == []


def test_payments_of_unknown_students_are_hidden(school):
    repository.payments.add({'student_id': 'gone', 'date': '2026-05-01', 'amount': 1000, 'type': 'enrollment'})
    assert '2026-05-01' not in _dates(filter_payments(load_state()))


def test_details_column():
    assert month_label('2026-03') == 'March 2026'
    assert payment_details({'type': 'monthly', 'month': '2026-01'}) == 'January 2026'
    assert payment_details({'type': 'uniform', 'description': 'Size M'}) == 'Size M'
    assert payment_details({'type': 'enrollment'}) == '-'


# ── Receipt ───────────────────────────────────────────────────────────────────

def test_receipt_uses_a_temporary_id_and_carries_a_qr_code(school):
    state = load_state()
    payment = state.payments[0]

    receipt = build_receipt(payment, state.student(payment['student_id']), 'DAROUL MOKHTAR', 'FCFA')

    assert receipt['id'].isdigit()
    assert receipt['id'] != payment['id']
    assert receipt['registration'] == 'R-001'
    assert base64.b64decode(receipt['qr_base64']).startswith(b'\x89PNG')


def test_recording_a_payment_shows_its_receipt(client, sign_in, school):
    sign_in('admin')

    response = client.post('/payments/new/', {
        'student_id': school['ndiaye'],
        'type':       'monthly',
        'month':      '2026-04',
        'amount':     '5000',
        'date':       '2026-04-03',
    })

    assert response.status_code == 302
    receipt = client.session[RECEIPT_SESSION_KEY]
    assert receipt['student_name'] == 'Ndiaye Moussa'
    assert receipt['details'] == 'April 2026'

    page = client.get('/payments/').content.decode()
    assert f'Receipt no. {receipt["id"]}' in page

    client.post('/payments/receipt/dismiss/')
    assert RECEIPT_SESSION_KEY not in client.session


def test_invalid_payment_is_not_stored(client, sign_in, school):
    sign_in('admin')

    response = client.post('/payments/new/', {'student_id': '', 'type': 'uniform', 'amount': '0', 'date': '2026-04-03'})

    assert response.status_code == 200
    body = response.content.decode()
    assert 'Please select a student.' in body
    assert 'Please add a description for the uniform.' in body
    assert len(repository.payments.get_all()) == 3


def test_user_role_cannot_record_payments(client, sign_in, school):
    sign_in('user')

    page = client.get('/payments/')
    assert page.status_code == 200
    assert 'Record payment' not in page.content.decode()

    response = client.post('/payments/new/', {'student_id': school['ndiaye'], 'type': 'enrollment',
                                              'amount': '100', 'date': '2026-04-03'})
    assert response.status_code == 302
    assert len(repository.payments.get_all()) == 3


# ── Dashboard ─────────────────────────────────────────────────────────────────

def test_dashboard_figures(school, make_user):
    clerk = make_user('clerk', 'admin')
    repository.expenses.add({'date': '2026-03-02', 'amount': 2000, 'category': 'water',
                             'description': 'Bill', 'user_id': clerk['id']})

    figures = dashboard_figures(load_state(), datetime.date(2026, 3, 15))

    assert figures['student_count'] == 2
    assert figures['teacher_count'] == 1
    assert figures['class_count'] == 3
    assert figures['total_collected'] == 27500
    assert figures['total_spent'] == 2000
    assert figures['balance'] == 25500
    assert figures['collected_this_month'] == 7500
    assert figures['by_payment_type'] == {'Enrollment': 15000, 'Monthly': 5000, 'Uniform': 7500}
    assert figures['by_expense_category']['Water'] == 2000
    assert [count for _, count in figures['students_per_class']] == [1, 2, 0]
    assert len(figures['recent_payments']) == 3


def test_dashboard_is_for_admins_only(client, sign_in, school):
    sign_in('user')
    response = client.get('/dashboard/')
    assert response.status_code == 302
    assert response.url == '/students/'


def test_imported_numeric_dates_still_sort(client, sign_in, school):
    repository.payments.put('legacy-payment', {
        'student_id': school['diallo'], 'date': 20250915, 'amount': 5000, 'type': 'enrollment',
    })
    repository.expenses.put('legacy-expense', {
        'date': 20250915, 'amount': 1000, 'category': 'water', 'description': 'Old bill',
    })
    repository.expenses.add({'date': '2026-04-01', 'amount': 3000, 'category': 'water'})

    rows = filter_payments(load_state())

    assert len(rows) == 4
    assert rows[-1]['payment']['id'] == 'legacy-payment'

    sign_in('admin')
    assert client.get('/expenses/').status_code == 200
    assert client.get('/payments/').status_code == 200
    assert client.get('/dashboard/').status_code == 200
