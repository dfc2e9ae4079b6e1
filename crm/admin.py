"""
Django admin configuration for CRM models.
"""
from django.contrib import admin
from .models import Customer


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = ['name', 'phone', 'created_at']
    search_fields = ['searchable_text', 'phone']
    readonly_fields = ['id', 'searchable_text', 'created_at', 'updated_at']
    ordering = ['-created_at']
