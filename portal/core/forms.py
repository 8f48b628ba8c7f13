"""
core/forms.py
─────────────
Upload form for the JSON database import.
"""

from django import forms

from records.forms import add_form_control_class

from .backup import BackupFormatError, parse_backup

MAX_IMPORT_BYTES = 10 * 1024 * 1024


class DatabaseImportForm(forms.Form):
    backup_file = forms.FileField(
        label='Backup file (.json)',
        widget=forms.ClearableFileInput(attrs={'accept': '.json,application/json'}),
    )

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        add_form_control_class(self)

    def clean_backup_file(self):
        """Parse the upload; the parsed mapping is available as `cleaned_data['backup']`."""
        upload = self.cleaned_data['backup_file']
        if upload.size > MAX_IMPORT_BYTES:
            raise forms.ValidationError('The file is too large (10 MB maximum).')
        try:
            self.cleaned_data['backup'] = parse_backup(upload.read())
        except BackupFormatError as exc:
            raise forms.ValidationError(f'Import rejected: {exc}') from exc
        return upload
