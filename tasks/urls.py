"""
URL configuration for the tasks app.
"""
from django.urls import path

from tasks.views import TaskSearchView

urlpatterns = [
    path('search/', TaskSearchView.as_view(), name='task-search'),
]
