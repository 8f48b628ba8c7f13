"""
core/backup.py
──────────────
Whole-store JSON backup used by the database browser.

File format
───────────
    {
      "users":    [{"id": "...", "username": "...", ...}, ...],
      "students": [...],
      ...
    }

Export writes every collection as stored (no display resolution).  Import
merges a file of the same shape: each document overwrites, or creates, the
record with its id.  The file is validated as a whole first and then written
in a single transaction, so either every document lands or none does.
"""

import json
import logging

from django.core.serializers.json import DjangoJSONEncoder
from django.db import transaction
from django.utils import timezone

from records.models import Collection
from records.repository import repository_for

logger = logging.getLogger(__name__)


class BackupFormatError(ValueError):
    """The uploaded file does not have the backup shape."""


def export_filename(today=None):
    today = today or timezone.localdate()
    return f"database_export_{today.strftime('%Y-%m-%d')}.json"


def export_database(state):
    """Every collection of *state*, documents carrying their id."""
    return {collection.value: list(state.records(collection)) for collection in Collection}


def dump(data):
    return json.dumps(data, cls=DjangoJSONEncoder, ensure_ascii=False, indent=2)


def parse_backup(raw):
    """
    Decode and validate a backup file.  Returns the mapping
    {collection: [documents]}; raises BackupFormatError describing the first
    problem found.
    """
    if isinstance(raw, bytes):
        try:
            raw = raw.decode('utf-8')
        except UnicodeDecodeError as exc:
            raise BackupFormatError('The file is not UTF-8 encoded JSON.') from exc
    try:
        data = json.loads(raw)
    except ValueError as exc:
        raise BackupFormatError(f'The file is not valid JSON: {exc}') from exc

    if not isinstance(data, dict):
        raise BackupFormatError('The file must contain a JSON object keyed by collection name.')

    for name, documents in data.items():
        if name not in Collection.values:
            raise BackupFormatError(f'Unknown collection "{name}".')
        if not isinstance(documents, list):
            raise BackupFormatError(f'The value of "{name}" must be a list of documents.')
        for position, document in enumerate(documents, start=1):
            if not isinstance(document, dict):
                raise BackupFormatError(f'Entry {position} of "{name}" is not an object.')
            if not isinstance(document.get('id'), str) or not document['id']:
                raise BackupFormatError(f'Entry {position} of "{name}" has no string "id".')
    return data


def import_database(data):
    """
    Write every document of a validated backup; returns the number written.
    A StoreError from any write rolls the whole import back.
    """
    written = 0
    with transaction.atomic():
        for name, documents in data.items():
            repo = repository_for(name)
            for document in documents:
                repo.put(document['id'], document)
                written += 1
    logger.info('Imported %d document(s) into %s', written, ', '.join(sorted(data)) or 'no collections')
    return written
