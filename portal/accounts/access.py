"""
accounts/access.py
──────────────────
Access-control decorators shared by every manager view.

Stack for a protected view:
  1. anonymous visitors      → /login/?next=<url>
  2. store unreachable       → load-error page (HTTP 503), nothing rendered
  3. account no longer exists → signed out, back to /login/
  4. page not in role's list → bounced to the role's default page
  5. edit=True, read-only    → bounced to the page's list view

On success the view receives `req.console_user` and `req.state` (the
ConsoleState snapshot of all six collections).
"""

from functools import wraps
from urllib.parse import quote

from django.contrib import messages
from django.http import HttpResponseNotAllowed
from django.shortcuts import redirect, render
from django.urls import reverse

from records.errors import StoreError
from records.state import load_state

from .navigation import can_edit, default_page, is_allowed, nav_item, pages_for
from .session import SESSION_USER_KEY, current_user, logout, session_user


def redirect_to_default(role):
    return redirect(nav_item(default_page(role)).url_name)


def page_required(page, edit=False):
    """Decorator: the signed-in user's role must be allowed on *page*."""
    def decorator(view_fn):
        @wraps(view_fn)
        def wrapper(req, *args, **kwargs):
            user = current_user(req)
            if user is None:
                return redirect(f"{reverse('login')}?next={quote(req.get_full_path())}")

            try:
                state = load_state()
            except StoreError as exc:
                return render(req, 'core/load_error.html', {'error': str(exc)}, status=503)

            stored = state.user(user.get('id'))
            if stored is None or not pages_for(stored.get('role')):
                logout(req)
                messages.error(req, 'Your account is no longer available. Please sign in again.')
                return redirect('login')

            # Role changes made by a superadmin apply on the next request.
            if stored.get('role') != user.get('role') or stored.get('username') != user.get('username'):
                user = session_user(stored)
                req.session[SESSION_USER_KEY] = user

            role = user['role']
            if not is_allowed(role, page):
                messages.error(req, 'Access denied – you do not have access to that page.')
                return redirect_to_default(role)
            if edit and not can_edit(role):
                messages.error(req, 'Access denied – your account is read-only.')
                return redirect(nav_item(page).url_name)

            req.console_user = user
            req.state = state
            return view_fn(req, *args, **kwargs)
        return wrapper
    return decorator


def require_POST_or_405(view_fn):
    """Decorator: return 405 for any non-POST request."""
    @wraps(view_fn)
    def wrapper(req, *args, **kwargs):
        if req.method != 'POST':
            return HttpResponseNotAllowed(['POST'])
        return view_fn(req, *args, **kwargs)
    return wrapper
