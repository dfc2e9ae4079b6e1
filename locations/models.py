"""
Locations app models - Places where work orders are carried out.
"""
from django.db import models

from tasks.search.related import SearchableRelatedModel
from tasks.search.searchable_text import build_location_searchable_text


class Location(SearchableRelatedModel):
    """A geocoded address with an optional display name."""

    SEARCH_FIELDS = ('name', 'address')
    TASK_RELATION = 'location'

    address = models.TextField(null=True, blank=True)
    name = models.CharField(max_length=255, null=True, blank=True)
    lat = models.FloatField()
    lng = models.FloatField()

    class Meta:
        ordering = ['-created_at']

    def __str__(self):
        return self.name or self.address or f"{self.lat}, {self.lng}"

    def build_searchable_text(self):
        return build_location_searchable_text(self)
