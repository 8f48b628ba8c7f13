"""
core/urls.py
────────────
URL patterns for sitewide pages and the raw database browser.
Include in the root urls.py with:
    path('', include('core.urls')),
"""

from django.urls import path

from . import views

urlpatterns = [
    path('',                  views.home_view,            name='homepage'),
    path('database/',         views.database_view,        name='database'),
    path('database/export/',  views.database_export_view, name='database_export'),
    path('database/import/',  views.database_import_view, name='database_import'),
]
