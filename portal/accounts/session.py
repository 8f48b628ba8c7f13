"""
accounts/session.py
───────────────────
The session gate: Anonymous ⇄ Authenticated(user).

login()  looks the user up in the `users` collection and succeeds only when
         the password matches exactly.  The signed-in user (id, username,
         role; never the password) is stored under one session key and is
         restored on every later request until logout().

Passwords written by the console are Django password hashes.  Records that
still carry a plaintext password (imported from an older export) are checked
with an exact constant-time comparison.
"""

import logging

from django.contrib.auth.hashers import check_password, identify_hasher, make_password
from django.utils.crypto import constant_time_compare

from records import repository

logger = logging.getLogger(__name__)

SESSION_USER_KEY = 'current_user'


class AuthError(Exception):
    """Wrong username or password."""

    def __init__(self, message='Invalid username or password.'):
        super().__init__(message)


# ── Passwords ─────────────────────────────────────────────────────────────────

def hash_password(raw_password):
    return make_password(raw_password)


def _is_hashed(stored):
    try:
        identify_hasher(stored)
    except ValueError:
        return False
    return True


def password_matches(stored, raw_password):
    """Exact match of *raw_password* against the stored value (hash or legacy plaintext)."""
    if not isinstance(stored, str) or not isinstance(raw_password, str):
        return False
    if _is_hashed(stored):
        return check_password(raw_password, stored)
    return constant_time_compare(stored, raw_password)


# ── Session state ─────────────────────────────────────────────────────────────

def session_user(user):
    """The subset of a user record that is kept in the session."""
    return {
        'id':       user['id'],
        'username': user['username'],
        'role':     user['role'],
    }


def authenticate(username, password):
    """Return the user record for these credentials or raise AuthError."""
    user = repository.users.find_by_username(username)
    if user is None or not password_matches(user.get('password'), password):
        logger.info('Rejected login for username %r', username)
        raise AuthError()
    return user


def login(req, username, password):
    user = authenticate(username, password)
    req.session.cycle_key()
    req.session[SESSION_USER_KEY] = session_user(user)
    logger.info('User %s signed in', user['username'])
    return req.session[SESSION_USER_KEY]


def logout(req):
    user = req.session.get(SESSION_USER_KEY)
    req.session.flush()
    if user:
        logger.info('User %s signed out', user.get('username'))


def current_user(req):
    """The signed-in user dict, or None when the session is anonymous."""
    return req.session.get(SESSION_USER_KEY)
