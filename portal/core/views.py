"""
core/views.py
─────────────
Sitewide pages: the root redirect, the raw database browser with its JSON
export / import (superadmin only) and the custom error handlers, which are
registered in portal/urls.py.
"""

import logging

from django.contrib import messages
from django.http import HttpResponse
from django.shortcuts import redirect, render

from accounts.access import page_required, redirect_to_default, require_POST_or_405
from accounts.session import current_user
from records.errors import StoreError
from records.models import Collection

from . import backup
from .browser import columns_for, table_rows
from .forms import DatabaseImportForm

logger = logging.getLogger(__name__)


def home_view(req):
    """Signed-in users go straight to their default page, everyone else to login."""
    user = current_user(req)
    if user is None:
        return redirect('login')
    return redirect_to_default(user['role'])


# ── Database browser ──────────────────────────────────────────────────────────

def _selected_collection(req):
    name = req.GET.get('collection', Collection.STUDENTS)
    if name not in Collection.values:
        return Collection.STUDENTS
    return Collection(name)


def _database_page(req, import_form=None):
    collection = _selected_collection(req)
    documents = req.state.records(collection)
    columns = columns_for(documents)
    return render(req, 'core/database.html', {
        'collections': Collection.choices,
        'collection':  collection,
        'columns':     columns,
        'rows':        table_rows(req.state, documents, columns),
        'count':       len(documents),
        'import_form': import_form or DatabaseImportForm(),
    })


@page_required('database')
def database_view(req):
    """
    GET /database/?collection=<name>

    One collection as a generic table, plus the export button and the
    import form.
    """
    return _database_page(req)


@page_required('database')
def database_export_view(req):
    """Download every collection as one JSON file."""
    filename = backup.export_filename()
    response = HttpResponse(
        backup.dump(backup.export_database(req.state)),
        content_type='application/json; charset=utf-8',
    )
    response['Content-Disposition'] = f'attachment; filename="{filename}"'
    logger.info('Database exported by %s', req.console_user['username'])
    return response


@page_required('database')
@require_POST_or_405
def database_import_view(req):
    """Merge an uploaded backup into the store, all or nothing."""
    form = DatabaseImportForm(req.POST, req.FILES)
    if not form.is_valid():
        messages.error(req, 'The import file was rejected. Nothing was changed.')
        return _database_page(req, import_form=form)

    try:
        written = backup.import_database(form.cleaned_data['backup'])
    except StoreError as exc:
        messages.error(req, f'{exc} Nothing was imported.')
        return redirect('database')

    messages.success(req, f'✅ Import complete: {written} document(s) written.')
    return redirect('database')


# ── Custom error pages ────────────────────────────────────────────────────────

def handler404(req, exception):
    return render(req, 'core/404.html', status=404)


def handler500(req):
    return render(req, 'core/500.html', status=500)
