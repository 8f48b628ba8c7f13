"""
core/browser.py
───────────────
Generic table rendering for the raw database browser.

Columns come from the first document's keys (the password hash is never
shown).  Reference ids are resolved for display:
    arabic_class_id / french_class_id → class name
    student_id                        → "registration - last first"
    user_id                           → username
Lists and objects are rendered as JSON text.
"""

import json

from records.state import UNRESOLVED

HIDDEN_COLUMNS = {'password'}


def columns_for(documents):
    if not documents:
        return []
    return [key for key in documents[0] if key not in HIDDEN_COLUMNS]


def _student_label(state, student_id):
    student = state.student(student_id)
    if student is None:
        return UNRESOLVED
    return (
        f"{student.get('registration_number', '')} - "
        f"{student.get('last_name', '')} {student.get('first_name', '')}"
    ).strip()


def display_value(state, column, value):
    if value is None:
        return ''
    if column in ('arabic_class_id', 'french_class_id'):
        return state.class_name(value)
    if column == 'student_id':
        return _student_label(state, value)
    if column == 'user_id':
        return state.username(value)
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False)
    return value


def table_rows(state, documents, columns):
    return [
        [display_value(state, column, document.get(column)) for column in columns]
        for document in documents
    ]
