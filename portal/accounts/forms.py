"""
accounts/forms.py
─────────────────
Console user management form (superadmin only).
"""

from django import forms

from records.forms import RecordForm
from records.models import Role

from .session import hash_password


class UserForm(RecordForm):
    """
    Create or edit a console account.

    - username must be unique across the `users` collection
    - password is required for a new account; on edit a blank password keeps
      the current one
    - the password is stored hashed, never echoed back into the form
    """

    username = forms.CharField(max_length=150, label='Username')
    password = forms.CharField(
        required=False,
        label='Password',
        widget=forms.PasswordInput(render_value=False),
    )
    role = forms.ChoiceField(choices=Role.choices, initial=Role.USER, label='Role')

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.initial.pop('password', None)
        if self.is_edit:
            self.fields['password'].help_text = 'Leave blank to keep the current password.'

    def clean_username(self):
        username = self.cleaned_data['username'].strip()
        current_id = self.instance['id'] if self.instance else None
        taken = any(
            u.get('username') == username and u['id'] != current_id
            for u in self.state.users
        )
        if taken:
            raise forms.ValidationError('This username is already taken.')
        return username

    def clean_password(self):
        password = self.cleaned_data.get('password', '')
        if not password and not self.is_edit:
            raise forms.ValidationError('A password is required for a new account.')
        return password

    def to_document(self):
        password = self.cleaned_data.get('password')
        return {
            'username': self.cleaned_data['username'],
            'role':     self.cleaned_data['role'],
            'password': hash_password(password) if password else None,
        }

    def cleared_fields(self):
        return []
