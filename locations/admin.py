from django.contrib import admin
from .models import Location


@admin.register(Location)
class LocationAdmin(admin.ModelAdmin):
    list_display = ['name', 'address', 'lat', 'lng', 'created_at']
    search_fields = ['searchable_text']
    readonly_fields = ['id', 'searchable_text', 'created_at', 'updated_at']
