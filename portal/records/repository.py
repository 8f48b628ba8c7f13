"""
records/repository.py
─────────────────────
The data-access layer: one repository per collection, all talking to the
Document store.

    get_all()                 -> list of {'id': ..., **fields}
    get(id)                   -> one record or None
    add(data)                 -> store-assigned id
    update(id, partial, unset=())
    remove(id)
    put(id, data)             -> overwrite-or-create (raw import only)

Users additionally expose find_by_username(); payments narrow their payload
by payment type before writing.

Every payload except put()'s goes through `clean_payload()` first: keys
whose value is None are dropped so optional fields are stored by omission,
Decimals become plain numbers and dates become ISO strings.  put() writes
imported documents untouched.  Any database failure is logged and
re-raised as StoreError; there is no retry.
"""

import datetime
import logging
from contextlib import contextmanager
from decimal import Decimal

from django.db import DatabaseError, transaction

from .errors import StoreError
from .models import Collection, Document, PaymentType

logger = logging.getLogger(__name__)


# ── Payload normalisation ─────────────────────────────────────────────────────

def as_number(value):
    """Return *value* as an int when it is integral, a float otherwise."""
    if value is None or value == '':
        return None
    number = Decimal(str(value))
    if number == number.to_integral_value():
        return int(number)
    return float(number)


def _json_value(value):
    if isinstance(value, Decimal):
        return as_number(value)
    if isinstance(value, (datetime.date, datetime.datetime)):
        return value.isoformat()
    return value


def clean_payload(data):
    """Drop absent (None) values and the `id` key, make values JSON-safe."""
    return {
        key: _json_value(value)
        for key, value in data.items()
        if value is not None and key != 'id'
    }


@contextmanager
def _store_call(action, collection):
    try:
        yield
    except DatabaseError as exc:
        logger.exception('Store failure while trying to %s in %s', action, collection)
        raise StoreError() from exc


# ── Generic repository ────────────────────────────────────────────────────────

class Repository:
    """CRUD over one collection of the document store."""

    def __init__(self, collection):
        self.collection = Collection(collection)

    def _documents(self):
        return Document.objects.filter(collection=self.collection)

    def get_all(self):
        with _store_call('list documents', self.collection):
            return [doc.as_record() for doc in self._documents()]

    def get(self, record_id):
        with _store_call('read a document', self.collection):
            doc = self._documents().filter(key=record_id).first()
        return doc.as_record() if doc else None

    def add(self, data):
        payload = clean_payload(data)
        with _store_call('add a document', self.collection):
            doc = Document.objects.create(collection=self.collection, data=payload)
        logger.info('Added %s/%s', self.collection, doc.key)
        return doc.key

    def update(self, record_id, data, unset=()):
        payload = clean_payload(data)
        with _store_call('update a document', self.collection):
            with transaction.atomic():
                doc = self._documents().select_for_update().filter(key=record_id).first()
                if doc is None:
                    raise StoreError(f'No record "{record_id}" in {self.collection}.')
                merged = {**doc.data, **payload}
                for key in unset:
                    if key not in payload:
                        merged.pop(key, None)
                doc.data = merged
                doc.save(update_fields=['data', 'updated_at'])
        logger.info('Updated %s/%s', self.collection, record_id)

    def remove(self, record_id):
        with _store_call('remove a document', self.collection):
            deleted, _ = self._documents().filter(key=record_id).delete()
        if deleted:
            logger.info('Removed %s/%s', self.collection, record_id)

    def put(self, record_id, data):
        """
        Overwrite the document stored under *record_id*, creating it if needed.
        The payload is written as given (explicit nulls included), minus `id`.
        """
        payload = {key: value for key, value in data.items() if key != 'id'}
        with _store_call('write a document', self.collection):
            Document.objects.update_or_create(
                collection=self.collection,
                key=record_id,
                defaults={'data': payload},
            )


class UserRepository(Repository):

    def __init__(self):
        super().__init__(Collection.USERS)

    def find_by_username(self, username):
        with _store_call('look up a user', self.collection):
            doc = self._documents().filter(data__username=username).first()
        return doc.as_record() if doc else None


class PaymentRepository(Repository):
    """
    Payments keep `month` only for monthly payments and `description` only for
    uniform payments.  Any other optional field is discarded on add.
    """

    CONDITIONAL_FIELDS = {
        'month':       PaymentType.MONTHLY,
        'description': PaymentType.UNIFORM,
    }

    def __init__(self):
        super().__init__(Collection.PAYMENTS)

    @classmethod
    def narrow(cls, data):
        payment_type = data.get('type')
        payload = {
            'student_id': data.get('student_id'),
            'date':       data.get('date'),
            'amount':     as_number(data.get('amount')),
            'type':       payment_type,
        }
        for field, owner_type in cls.CONDITIONAL_FIELDS.items():
            if payment_type == owner_type and data.get(field):
                payload[field] = data[field]
        return payload

    def add(self, data):
        return super().add(self.narrow(data))

    def update(self, record_id, data, unset=()):
        payload = dict(data)
        unset = set(unset)
        if 'amount' in payload:
            payload['amount'] = as_number(payload['amount'])
        payment_type = payload.get('type')
        if payment_type:
            for field, owner_type in self.CONDITIONAL_FIELDS.items():
                if payment_type != owner_type:
                    payload.pop(field, None)
                    unset.add(field)
        super().update(record_id, payload, unset=unset)


# ── Collection → repository mapping ───────────────────────────────────────────

users    = UserRepository()
students = Repository(Collection.STUDENTS)
teachers = Repository(Collection.TEACHERS)
classes  = Repository(Collection.CLASSES)
payments = PaymentRepository()
expenses = Repository(Collection.EXPENSES)

REPOSITORIES = {
    Collection.USERS:    users,
    Collection.STUDENTS: students,
    Collection.TEACHERS: teachers,
    Collection.CLASSES:  classes,
    Collection.PAYMENTS: payments,
    Collection.EXPENSES: expenses,
}


def repository_for(collection):
    """Return the repository of *collection*; raises ValueError for unknown names."""
    return REPOSITORIES[Collection(collection)]
