"""
accounts/views.py
─────────────────
Sign-in / sign-out and the console user manager (superadmin only).
"""

from django.contrib import messages
from django.shortcuts import redirect, render
from django.utils.http import url_has_allowed_host_and_scheme

from records import repository
from records.errors import StoreError
from records.views import delete_record, save_record

from .access import page_required, redirect_to_default, require_POST_or_405
from .forms import UserForm
from .session import AuthError, current_user, login, logout


# ── Login / Logout ────────────────────────────────────────────────────────────

def login_view(req):
    """Show the login form (GET) or authenticate and redirect (POST)."""
    user = current_user(req)
    if user is not None:
        return redirect_to_default(user['role'])

    if req.method == 'POST':
        username = req.POST.get('username', '')
        password = req.POST.get('password', '')
        try:
            user = login(req, username, password)
        except AuthError as exc:
            messages.error(req, str(exc))
        except StoreError:
            messages.error(req, 'Login error. Please try again.')
        else:
            messages.success(req, f'Welcome back, {user["username"]}!')
            next_url = req.POST.get('next') or req.GET.get('next')
            if next_url and url_has_allowed_host_and_scheme(next_url, allowed_hosts={req.get_host()}):
                return redirect(next_url)
            return redirect_to_default(user['role'])

    return render(req, 'accounts/login.html', {
        'next':     req.GET.get('next', ''),
        'username': req.POST.get('username', ''),
    })


@require_POST_or_405
def logout_view(req):
    """Log the current user out — POST only for CSRF safety."""
    logout(req)
    messages.info(req, 'You have been logged out.')
    return redirect('login')


# ── User manager ──────────────────────────────────────────────────────────────

@page_required('users')
def user_list_view(req):
    users = sorted(req.state.users, key=lambda u: u.get('username', '').lower())
    return render(req, 'accounts/user_list.html', {
        'users':      users,
        'current_id': req.console_user['id'],
    })


@page_required('users', edit=True)
def user_form_view(req, user_id=None):
    instance = None
    if user_id:
        instance = req.state.user(user_id)
        if instance is None:
            messages.error(req, 'User not found.')
            return redirect('user_list')

    if req.method == 'POST':
        form = UserForm(req.POST, state=req.state, instance=instance)
        if form.is_valid():
            if save_record(req, form, repository.users, instance, f'User "{form.cleaned_data["username"]}"'):
                return redirect('user_list')
        else:
            messages.error(req, 'Please fix the errors below.')
    else:
        form = UserForm(state=req.state, instance=instance)

    return render(req, 'records/record_form.html', {
        'form':       form,
        'instance':   instance,
        'title':      'Edit user' if instance else 'New user',
        'cancel_url': 'user_list',
    })


@page_required('users', edit=True)
def user_delete_view(req, user_id):
    user = req.state.user(user_id)
    if user is None:
        messages.error(req, 'User not found.')
        return redirect('user_list')
    if user_id == req.console_user['id']:
        messages.error(req, 'You cannot delete your own account.')
        return redirect('user_list')

    if req.method == 'POST':
        delete_record(req, repository.users, user_id, f'User "{user.get("username", "")}"')
        return redirect('user_list')

    return render(req, 'records/confirm_delete.html', {
        'title':      'Delete user',
        'message':    f'Are you sure you want to delete the account {user.get("username", "")}?',
        'cancel_url': 'user_list',
    })
