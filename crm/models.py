"""
CRM app models - Customers that work orders are done for.
"""
from django.db import models

from tasks.search.related import SearchableRelatedModel
from tasks.search.searchable_text import build_customer_searchable_text


class Customer(SearchableRelatedModel):
    """
    A customer. Name and phone are both optional; tasks copy them into
    their own searchable text.
    """

    SEARCH_FIELDS = ('name', 'phone')
    TASK_RELATION = 'customer'

    name = models.CharField(max_length=255, null=True, blank=True)
    phone = models.CharField(max_length=32, null=True, blank=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['name'], name='crm_customer_name_idx'),
            models.Index(fields=['phone'], name='crm_customer_phone_idx'),
        ]

    def __str__(self):
        return self.name or self.phone or str(self.pk)

    def build_searchable_text(self):
        return build_customer_searchable_text(self)
