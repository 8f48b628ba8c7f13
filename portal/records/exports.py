"""
records/exports.py
──────────────────
Spreadsheet exports of the display-resolved record lists.

Each builder turns the loaded state into rows keyed by human-readable column
headers (class names instead of ids); `spreadsheet_response()` writes them
into a single-sheet workbook named `<entity>_list_<YYYY-MM-DD>.xlsx`.
"""

from io import BytesIO

from django.http import HttpResponse
from django.utils import timezone
from openpyxl import Workbook

from .models import ClassType
from .state import UNRESOLVED, sort_by_name

XLSX_CONTENT_TYPE = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'

STUDENT_HEADERS = [
    'Registration number', 'Last name', 'First name', 'Birth date',
    'Arabic class', 'French class',
]
TEACHER_HEADERS = [
    'Registration number', 'Last name', 'First name', 'Subject',
    'Arabic class', 'French class',
]
CLASS_HEADERS = ['Name', 'Type', 'Students', 'Teacher']


def student_rows(state):
    return [
        dict(zip(STUDENT_HEADERS, [
            s.get('registration_number', ''),
            s.get('last_name', ''),
            s.get('first_name', ''),
            s.get('birth_date', ''),
            state.class_name(s.get('arabic_class_id')),
            state.class_name(s.get('french_class_id')),
        ]))
        for s in sort_by_name(state.students)
    ]


def teacher_rows(state):
    return [
        dict(zip(TEACHER_HEADERS, [
            t.get('registration_number', ''),
            t.get('last_name', ''),
            t.get('first_name', ''),
            t.get('subject') or UNRESOLVED,
            state.class_name(t.get('arabic_class_id'), ClassType.ARABIC),
            state.class_name(t.get('french_class_id'), ClassType.FRENCH),
        ]))
        for t in sort_by_name(state.teachers)
    ]


def class_rows(state):
    rows = []
    for c in sorted(state.classes, key=lambda c: (c.get('type', ''), c.get('name', ''))):
        teachers = state.teachers_in_class(c['id'])
        teacher = teachers[0] if teachers else None
        rows.append(dict(zip(CLASS_HEADERS, [
            c.get('name', ''),
            ClassType(c['type']).label if c.get('type') in ClassType.values else c.get('type', ''),
            len(state.students_in_class(c['id'])),
            f"{teacher.get('last_name', '')} {teacher.get('first_name', '')}".strip()
            if teacher else UNRESOLVED,
        ])))
    return rows


def build_workbook(headers, rows, sheet_title):
    wb = Workbook()
    ws = wb.active
    ws.title = sheet_title[:31]
    ws.append(headers)
    for row in rows:
        ws.append([row.get(h, '') for h in headers])
    return wb


def export_filename(entity, today=None):
    today = today or timezone.localdate()
    return f"{entity}_list_{today.isoformat()}.xlsx"


def spreadsheet_response(entity, headers, rows, sheet_title):
    buf = BytesIO()
    build_workbook(headers, rows, sheet_title).save(buf)
    response = HttpResponse(buf.getvalue(), content_type=XLSX_CONTENT_TYPE)
    response['Content-Disposition'] = f'attachment; filename="{export_filename(entity)}"'
    return response
