"""
accounts/urls.py
────────────────
URL patterns for authentication and console user management.
Include in the root urls.py with:
    path('', include('accounts.urls')),
"""

from django.urls import path

from . import views

urlpatterns = [
    path('login/',  views.login_view,  name='login'),
    path('logout/', views.logout_view, name='logout'),
    path('users/',                      views.user_list_view,   name='user_list'),
    path('users/new/',                  views.user_form_view,   name='user_create'),
    path('users/<str:user_id>/edit/',   views.user_form_view,   name='user_edit'),
    path('users/<str:user_id>/delete/', views.user_delete_view, name='user_delete'),
]
