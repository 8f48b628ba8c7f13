"""
records/errors.py
─────────────────
Errors raised by the data-access layer and the cross-entity rules.

Form validation uses Django's own `forms.ValidationError`; bad credentials
raise `accounts.session.AuthError`.
"""


class StoreError(Exception):
    """The document store could not complete a read or a write."""

    default_message = 'The database is unavailable. Please try again.'

    def __init__(self, message=None):
        super().__init__(message or self.default_message)


class ReferentialError(Exception):
    """A record cannot be removed because other records still point at it."""

    def __init__(self, message, count):
        super().__init__(message)
        self.count = count
