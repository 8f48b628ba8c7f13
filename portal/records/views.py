"""
records/views.py
────────────────
School record managers: students, teachers and classes.

Each manager offers
  • a list of every loaded record with related class names resolved
  • a create / edit form (admins only) that re-opens with the error banner
    when the store rejects the write
  • a delete confirmation page (admins only); classes that still have
    students cannot be deleted
  • a spreadsheet export of the displayed rows
"""

import logging

from django.contrib import messages
from django.shortcuts import redirect, render

from accounts.access import page_required
from accounts.navigation import can_edit

from . import exports, repository
from .errors import ReferentialError, StoreError
from .forms import ClassForm, StudentForm, TeacherForm
from .models import ClassType
from .state import sort_by_name

logger = logging.getLogger(__name__)


# ── Shared helpers ────────────────────────────────────────────────────────────

def save_record(req, form, repo, instance, label):
    """
    Write a valid form through *repo*.  Returns True on success; on a store
    failure the error banner is queued and False is returned so the caller
    re-renders the form with the submitted values.
    """
    try:
        if instance:
            repo.update(instance['id'], form.to_document(), unset=form.cleared_fields())
        else:
            repo.add(form.to_document())
    except StoreError as exc:
        messages.error(req, str(exc))
        return False
    verb = 'updated' if instance else 'added'
    messages.success(req, f'✅ {label} {verb} successfully.')
    return True


def delete_record(req, repo, record_id, label):
    try:
        repo.remove(record_id)
    except StoreError as exc:
        messages.error(req, str(exc))
        return False
    messages.success(req, f'🗑 {label} deleted.')
    return True


def _full_name(record):
    return f"{record.get('last_name', '')} {record.get('first_name', '')}".strip()


# ── Students ──────────────────────────────────────────────────────────────────

@page_required('students')
def student_list_view(req):
    state = req.state
    rows = [
        {
            'record':       s,
            'arabic_class': state.class_name(s.get('arabic_class_id')),
            'french_class': state.class_name(s.get('french_class_id')),
        }
        for s in sort_by_name(state.students)
    ]
    return render(req, 'records/student_list.html', {
        'rows':     rows,
        'can_edit': can_edit(req.console_user['role']),
    })


@page_required('students', edit=True)
def student_form_view(req, student_id=None):
    """
    GET  /students/new/        — blank form
    GET  /students/<id>/edit/  — pre-filled form
    POST                       — validate (all errors at once), save, back to the list
    """
    instance = None
    if student_id:
        instance = req.state.student(student_id)
        if instance is None:
            messages.error(req, 'Student not found.')
            return redirect('student_list')

    if req.method == 'POST':
        form = StudentForm(req.POST, state=req.state, instance=instance)
        if form.is_valid():
            if save_record(req, form, repository.students, instance, f'Student "{form.cleaned_data["last_name"]}"'):
                return redirect('student_list')
        else:
            messages.error(req, 'Please fix the errors below.')
    else:
        form = StudentForm(state=req.state, instance=instance)

    return render(req, 'records/record_form.html', {
        'form':       form,
        'instance':   instance,
        'title':      'Edit student' if instance else 'New student',
        'cancel_url': 'student_list',
    })


@page_required('students', edit=True)
def student_delete_view(req, student_id):
    student = req.state.student(student_id)
    if student is None:
        messages.error(req, 'Student not found.')
        return redirect('student_list')

    if req.method == 'POST':
        delete_record(req, repository.students, student_id, f'Student "{_full_name(student)}"')
        return redirect('student_list')

    return render(req, 'records/confirm_delete.html', {
        'title':      'Delete student',
        'message':    f'Are you sure you want to delete {_full_name(student)}? This cannot be undone.',
        'cancel_url': 'student_list',
    })


@page_required('students')
def student_export_view(req):
    return exports.spreadsheet_response(
        'students', exports.STUDENT_HEADERS, exports.student_rows(req.state), 'Students',
    )


# ── Teachers ──────────────────────────────────────────────────────────────────

@page_required('teachers')
def teacher_list_view(req):
    state = req.state
    rows = [
        {
            'record':       t,
            'arabic_class': state.class_name(t.get('arabic_class_id'), ClassType.ARABIC),
            'french_class': state.class_name(t.get('french_class_id'), ClassType.FRENCH),
        }
        for t in sort_by_name(state.teachers)
    ]
    return render(req, 'records/teacher_list.html', {
        'rows':     rows,
        'can_edit': can_edit(req.console_user['role']),
    })


@page_required('teachers', edit=True)
def teacher_form_view(req, teacher_id=None):
    instance = None
    if teacher_id:
        instance = req.state.find('teachers', teacher_id)
        if instance is None:
            messages.error(req, 'Teacher not found.')
            return redirect('teacher_list')

    if req.method == 'POST':
        form = TeacherForm(req.POST, state=req.state, instance=instance)
        if form.is_valid():
            if save_record(req, form, repository.teachers, instance, f'Teacher "{form.cleaned_data["last_name"]}"'):
                return redirect('teacher_list')
        else:
            messages.error(req, 'Please fix the errors below.')
    else:
        form = TeacherForm(state=req.state, instance=instance)

    return render(req, 'records/record_form.html', {
        'form':       form,
        'instance':   instance,
        'title':      'Edit teacher' if instance else 'New teacher',
        'cancel_url': 'teacher_list',
    })


@page_required('teachers', edit=True)
def teacher_delete_view(req, teacher_id):
    teacher = req.state.find('teachers', teacher_id)
    if teacher is None:
        messages.error(req, 'Teacher not found.')
        return redirect('teacher_list')

    if req.method == 'POST':
        delete_record(req, repository.teachers, teacher_id, f'Teacher "{_full_name(teacher)}"')
        return redirect('teacher_list')

    return render(req, 'records/confirm_delete.html', {
        'title':      'Delete teacher',
        'message':    f'Are you sure you want to delete {_full_name(teacher)}? This cannot be undone.',
        'cancel_url': 'teacher_list',
    })


@page_required('teachers')
def teacher_export_view(req):
    return exports.spreadsheet_response(
        'teachers', exports.TEACHER_HEADERS, exports.teacher_rows(req.state), 'Teachers',
    )


# ── Classes ───────────────────────────────────────────────────────────────────

@page_required('classes')
def class_list_view(req):
    state = req.state
    rows = [
        {
            'record':        c,
            'type_label':    ClassType(c['type']).label if c.get('type') in ClassType.values else c.get('type', '-'),
            'student_count': len(state.students_in_class(c['id'])),
        }
        for c in sorted(state.classes, key=lambda c: (c.get('type', ''), c.get('name', '')))
    ]
    return render(req, 'records/class_list.html', {
        'rows':     rows,
        'can_edit': can_edit(req.console_user['role']),
    })


@page_required('classes')
def class_detail_view(req, class_id):
    """A class with its enrolled students and the teachers assigned to it."""
    state = req.state
    school_class = state.school_class(class_id)
    if school_class is None:
        messages.error(req, 'Class not found.')
        return redirect('class_list')

    return render(req, 'records/class_detail.html', {
        'school_class': school_class,
        'students':     sort_by_name(state.students_in_class(class_id)),
        'teachers':     sort_by_name(state.teachers_in_class(class_id)),
        'can_edit':     can_edit(req.console_user['role']),
    })


@page_required('classes', edit=True)
def class_form_view(req, class_id=None):
    instance = None
    if class_id:
        instance = req.state.school_class(class_id)
        if instance is None:
            messages.error(req, 'Class not found.')
            return redirect('class_list')

    if req.method == 'POST':
        form = ClassForm(req.POST, state=req.state, instance=instance)
        if form.is_valid():
            if save_record(req, form, repository.classes, instance, f'Class "{form.cleaned_data["name"]}"'):
                return redirect('class_list')
        else:
            messages.error(req, 'Please fix the errors below.')
    else:
        form = ClassForm(state=req.state, instance=instance)

    return render(req, 'records/record_form.html', {
        'form':       form,
        'instance':   instance,
        'title':      'Edit class' if instance else 'New class',
        'cancel_url': 'class_list',
    })


@page_required('classes', edit=True)
def class_delete_view(req, class_id):
    """
    Refused while any student still references the class; the banner shows
    how many.  Student references are never cleared by a delete.
    """
    state = req.state
    school_class = state.school_class(class_id)
    if school_class is None:
        messages.error(req, 'Class not found.')
        return redirect('class_list')

    try:
        state.ensure_class_deletable(class_id)
    except ReferentialError as exc:
        logger.info('Refused to delete class %s: %s student(s) enrolled', class_id, exc.count)
        messages.error(req, str(exc))
        return redirect('class_detail', class_id=class_id)

    if req.method == 'POST':
        delete_record(req, repository.classes, class_id, f'Class "{school_class.get("name", "")}"')
        return redirect('class_list')

    return render(req, 'records/confirm_delete.html', {
        'title':      'Delete class',
        'message':    f'Are you sure you want to delete the class {school_class.get("name", "")}? '
                      'This cannot be undone.',
        'cancel_url': 'class_list',
    })


@page_required('classes')
def class_export_view(req):
    return exports.spreadsheet_response(
        'classes', exports.CLASS_HEADERS, exports.class_rows(req.state), 'Classes',
    )
