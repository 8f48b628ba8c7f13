"""
URL configuration for the school portal.

── Routing ────────────────────────────────────────────────────────────────────
  path('', include('core.urls')),       # root redirect + raw database browser
  path('', include('accounts.urls')),   # login / logout / console users
  path('', include('records.urls')),    # students, teachers, classes
  path('', include('finances.urls')),   # dashboard, payments, expenses
"""

from django.urls import include, path

urlpatterns = [
    path('', include('core.urls')),
    path('', include('accounts.urls')),
    path('', include('records.urls')),
    path('', include('finances.urls')),
]

handler404 = 'core.views.handler404'
handler500 = 'core.views.handler500'
