"""
records/state.py
────────────────
The console's application state: the six collections, loaded together.

Every page works on one ConsoleState snapshot loaded at the start of the
request.  Loading is all-or-nothing: a single query reads the whole store and
any failure raises StoreError, which the access decorators turn into the
load-error page.  Mutations go through the repositories and end with a
redirect, so the next request reloads what changed.

The lookup helpers here resolve reference ids into display strings and
enforce the cross-entity rules (class deletion guard).
"""

import logging
from dataclasses import dataclass, field

from django.db import DatabaseError

from .errors import ReferentialError, StoreError
from .models import Collection, Document

logger = logging.getLogger(__name__)

UNRESOLVED = '-'


@dataclass
class ConsoleState:
    users:    list = field(default_factory=list)
    students: list = field(default_factory=list)
    teachers: list = field(default_factory=list)
    classes:  list = field(default_factory=list)
    payments: list = field(default_factory=list)
    expenses: list = field(default_factory=list)

    def records(self, collection):
        return getattr(self, Collection(collection).value)

    # ── Lookups ───────────────────────────────────────────────────────────────

    @staticmethod
    def _find(records, record_id):
        if not record_id:
            return None
        return next((r for r in records if r['id'] == record_id), None)

    def find(self, collection, record_id):
        return self._find(self.records(collection), record_id)

    def user(self, user_id):
        return self._find(self.users, user_id)

    def student(self, student_id):
        return self._find(self.students, student_id)

    def school_class(self, class_id):
        return self._find(self.classes, class_id)

    def class_name(self, class_id, class_type=None):
        """Name of the class *class_id*, or '-' when it does not resolve."""
        found = self.school_class(class_id)
        if found is None or (class_type and found.get('type') != class_type):
            return UNRESOLVED
        return found.get('name', UNRESOLVED)

    def student_name(self, student_id):
        found = self.student(student_id)
        if found is None:
            return UNRESOLVED
        return f"{found.get('last_name', '')} {found.get('first_name', '')}".strip()

    def username(self, user_id):
        found = self.user(user_id)
        return found.get('username', UNRESOLVED) if found else UNRESOLVED

    def classes_of_type(self, class_type):
        return [c for c in self.classes if c.get('type') == class_type]

    # ── Class membership ──────────────────────────────────────────────────────

    @staticmethod
    def _in_class(record, class_id):
        return class_id in (record.get('arabic_class_id'), record.get('french_class_id'))

    def students_in_class(self, class_id):
        return [s for s in self.students if self._in_class(s, class_id)]

    def teachers_in_class(self, class_id):
        return [t for t in self.teachers if self._in_class(t, class_id)]

    def ensure_class_deletable(self, class_id):
        """Raise ReferentialError when students still reference *class_id*."""
        count = len(self.students_in_class(class_id))
        if count:
            raise ReferentialError(
                f'This class cannot be deleted: it still has {count} student(s).',
                count=count,
            )


def sort_by_name(records):
    """Records ordered by last name, then first name, case-insensitively."""
    return sorted(
        records,
        key=lambda r: (str(r.get('last_name', '')).lower(), str(r.get('first_name', '')).lower()),
    )


def load_state():
    """Read every collection in one pass; raise StoreError on any failure."""
    state = ConsoleState()
    try:
        for doc in Document.objects.all():
            state.records(doc.collection).append(doc.as_record())
    except DatabaseError as exc:
        logger.exception('Initial load of the document store failed')
        raise StoreError('Error loading data. Please refresh the page.') from exc
    return state
