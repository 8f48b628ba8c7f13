"""
accounts/context_processors.py
──────────────────────────────
Injects the signed-in user and the role-filtered navigation into every
template.

Registered in settings.py → TEMPLATES[0]['OPTIONS']['context_processors'].
"""

from .navigation import can_edit, pages_for
from .session import current_user


def navigation(request):
    """
        console_user  – session user dict (id / username / role) or None
        nav_items     – NavItems this role may open, in menu order
        active_page   – page id of the current URL, used to highlight the menu
        can_edit      – True for roles allowed to create / update / delete
    """
    user = getattr(request, 'console_user', None) or current_user(request)
    role = user['role'] if user else None
    match = getattr(request, 'resolver_match', None)
    return {
        'console_user': user,
        'nav_items':    pages_for(role) if user else [],
        'active_page':  _page_of(match.url_name if match else ''),
        'can_edit':     can_edit(role) if user else False,
    }


_PAGE_PREFIXES = {
    'dashboard': 'dashboard',
    'student':   'students',
    'teacher':   'teachers',
    'class':     'classes',
    'payment':   'payments',
    'expense':   'expenses',
    'user':      'users',
    'database':  'database',
}


def _page_of(url_name):
    prefix = (url_name or '').split('_')[0]
    return _PAGE_PREFIXES.get(prefix, '')
