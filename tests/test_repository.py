from decimal import Decimal

import pytest
from django.db import DatabaseError

from records import repository
from records.errors import StoreError
from records.models import Document

pytestmark = pytest.mark.django_db


def test_add_then_get_all_omits_absent_optionals():
    new_id = repository.teachers.add({
        'registration_number': 'T-9',
        'last_name':           'Ba',
        'first_name':          'Ali',
        'subject':             None,
        'arabic_class_id':     None,
        'french_class_id':     'c1',
    })

    records = repository.teachers.get_all()
    assert records == [{
        'id':                  new_id,
        'registration_number': 'T-9',
        'last_name':           'Ba',
        'first_name':          'Ali',
        'french_class_id':     'c1',
    }]
    assert 'subject' not in Document.objects.get(key=new_id).data


def test_store_assigns_twenty_character_ids():
    new_id = repository.classes.add({'name': 'CP', 'type': 'french'})
    assert len(new_id) == 20
    assert repository.classes.get(new_id)['name'] == 'CP'


def test_collections_are_isolated():
    repository.classes.add({'name': 'CP', 'type': 'french'})
    assert repository.students.get_all() == []


def test_update_merges_and_unsets():
    new_id = repository.teachers.add({'last_name': 'Ba', 'subject': 'Maths', 'french_class_id': 'c1'})

    repository.teachers.update(new_id, {'last_name': 'Bah', 'subject': None}, unset=['subject'])

    assert repository.teachers.get(new_id) == {'id': new_id, 'last_name': 'Bah', 'french_class_id': 'c1'}


def test_update_missing_record_raises_store_error():
    with pytest.raises(StoreError):
        repository.students.update('does-not-exist', {'last_name': 'X'})


def test_remove_is_idempotent():
    new_id = repository.classes.add({'name': 'CP', 'type': 'french'})
    repository.classes.remove(new_id)
    repository.classes.remove(new_id)
    assert repository.classes.get(new_id) is None


def test_put_creates_then_overwrites():
    repository.classes.put('fixed-id', {'id': 'fixed-id', 'name': 'CE1', 'type': 'french'})
    repository.classes.put('fixed-id', {'name': 'CE2', 'type': 'french'})

    assert repository.classes.get_all() == [{'id': 'fixed-id', 'name': 'CE2', 'type': 'french'}]


def test_decimal_amounts_are_stored_as_numbers():
    new_id = repository.expenses.add({'amount': Decimal('2500.00'), 'category': 'water'})
    assert repository.expenses.get(new_id)['amount'] == 2500


def test_find_by_username_is_exact():
    repository.users.add({'username': 'admin', 'password': 'x', 'role': 'admin'})

    assert repository.users.find_by_username('admin')['role'] == 'admin'
    assert repository.users.find_by_username('Admin') is None
    assert repository.users.find_by_username('adm') is None


# ── Payment narrowing ─────────────────────────────────────────────────────────

@pytest.mark.parametrize('payment_type, kept, dropped', [
    ('monthly',    'month',       'description'),
    ('uniform',    'description', 'month'),
    ('enrollment', None,          'month'),
])
def test_payment_add_keeps_only_the_matching_conditional_field(payment_type, kept, dropped):
    new_id = repository.payments.add({
        'student_id':  's1',
        'date':        '2026-03-01',
        'amount':      Decimal('5000'),
        'type':        payment_type,
        'month':       '2026-03',
        'description': 'Size M',
        'note':        'not a payment field',
    })

    stored = repository.payments.get(new_id)
    assert stored['amount'] == 5000
    assert dropped not in stored
    assert 'note' not in stored
    if kept:
        assert kept in stored
    else:
        assert 'description' not in stored


def test_payment_type_change_drops_stale_conditional_field():
    new_id = repository.payments.add({
        'student_id': 's1', 'date': '2026-03-01', 'amount': 5000,
        'type': 'monthly', 'month': '2026-03',
    })

    repository.payments.update(new_id, {'type': 'uniform', 'description': 'Size L'})

    stored = repository.payments.get(new_id)
    assert stored['type'] == 'uniform'
    assert stored['description'] == 'Size L'
    assert 'month' not in stored


def test_database_failure_becomes_store_error(monkeypatch):
    def broken(*args, **kwargs):
        raise DatabaseError('connection lost')

    monkeypatch.setattr(Document.objects, 'create', broken)
    with pytest.raises(StoreError) as excinfo:
        repository.classes.add({'name': 'CP', 'type': 'french'})
    assert 'unavailable' in str(excinfo.value)


def test_repository_for_rejects_unknown_collections():
    assert repository.repository_for('payments') is repository.payments
    with pytest.raises(ValueError):
        repository.repository_for('grades')
