"""
Django admin configuration for tasks.
"""
from django.contrib import admin

from .models import Task, TaskAssignment


class TaskAssignmentInline(admin.TabularInline):
    model = TaskAssignment
    extra = 0
    fields = ['assignee_id', 'created_at']
    readonly_fields = ['created_at']


@admin.register(Task)
class TaskAdmin(admin.ModelAdmin):
    list_display = ['id', 'title', 'status', 'customer', 'scheduled_at', 'deleted_at', 'created_at']
    list_filter = ['status', 'scheduled_at', 'deleted_at']
    search_fields = ['searchable_text']
    raw_id_fields = ['customer', 'location']
    readonly_fields = ['searchable_text', 'created_at', 'updated_at']
    ordering = ['-created_at']
    inlines = [TaskAssignmentInline]
