"""
accounts/navigation.py
──────────────────────
Role-based navigation as plain data plus three pure functions.

Each navigation item declares the roles allowed to open it.  Views, the
access decorators and the navigation bar all ask the same questions:

    is_allowed(role, page)  – may this role open this page?
    default_page(role)      – where does this role land?
    pages_for(role)         – the navigation items this role sees
"""

from dataclasses import dataclass

from records.models import Role

EVERYONE    = frozenset({Role.USER.value, Role.ADMIN.value, Role.SUPERADMIN.value})
ADMINS      = frozenset({Role.ADMIN.value, Role.SUPERADMIN.value})
SUPERADMINS = frozenset({Role.SUPERADMIN.value})

# Roles allowed to create, update and delete records.
EDITOR_ROLES = ADMINS


@dataclass(frozen=True)
class NavItem:
    page: str
    label: str
    url_name: str
    roles: frozenset


NAV_ITEMS = (
    NavItem('dashboard', 'Dashboard',  'dashboard',      ADMINS),
    NavItem('students',  'Students',   'student_list',   EVERYONE),
    NavItem('teachers',  'Teachers',   'teacher_list',   EVERYONE),
    NavItem('classes',   'Classes',    'class_list',     EVERYONE),
    NavItem('payments',  'Payments',   'payment_list',   EVERYONE),
    NavItem('expenses',  'Expenses',   'expense_list',   EVERYONE),
    NavItem('users',     'Users',      'user_list',      SUPERADMINS),
    NavItem('database',  'Database',   'database',       SUPERADMINS),
)

_BY_PAGE = {item.page: item for item in NAV_ITEMS}


def _role(role):
    # Role members and plain strings compare equal but do not hash alike.
    return str(role) if role else ''


def nav_item(page):
    return _BY_PAGE[page]


def is_allowed(role, page):
    item = _BY_PAGE.get(page)
    return item is not None and _role(role) in item.roles


def can_edit(role):
    return _role(role) in EDITOR_ROLES


def pages_for(role):
    return [item for item in NAV_ITEMS if _role(role) in item.roles]


def default_page(role):
    """Dashboard for admins, the student list for everyone else."""
    if is_allowed(role, 'dashboard'):
        return 'dashboard'
    return 'students'
