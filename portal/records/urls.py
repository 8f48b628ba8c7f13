"""
records/urls.py
───────────────
Student, teacher and class managers.
Include in the root urls.py with:
    path('', include('records.urls')),
"""

from django.urls import path

from . import views

urlpatterns = [
    # Students
    path('students/',                       views.student_list_view,   name='student_list'),
    path('students/new/',                   views.student_form_view,   name='student_create'),
    path('students/<str:student_id>/edit/', views.student_form_view,   name='student_edit'),
    path('students/<str:student_id>/delete/', views.student_delete_view, name='student_delete'),
    path('students/export/',                views.student_export_view, name='student_export'),
    # Teachers
    path('teachers/',                       views.teacher_list_view,   name='teacher_list'),
    path('teachers/new/',                   views.teacher_form_view,   name='teacher_create'),
    path('teachers/<str:teacher_id>/edit/', views.teacher_form_view,   name='teacher_edit'),
    path('teachers/<str:teacher_id>/delete/', views.teacher_delete_view, name='teacher_delete'),
    path('teachers/export/',                views.teacher_export_view, name='teacher_export'),
    # Classes
    path('classes/',                        views.class_list_view,     name='class_list'),
    path('classes/new/',                    views.class_form_view,     name='class_create'),
    path('classes/export/',                 views.class_export_view,   name='class_export'),
    path('classes/<str:class_id>/',         views.class_detail_view,   name='class_detail'),
    path('classes/<str:class_id>/edit/',    views.class_form_view,     name='class_edit'),
    path('classes/<str:class_id>/delete/',  views.class_delete_view,   name='class_delete'),
]
