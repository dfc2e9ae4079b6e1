"""
Tasks app models - Work orders and their assignees.
"""
from django.db import models, transaction

from fieldops.utils.base_model import BaseModel
from fieldops.utils.enum import choices
from tasks.search.searchable_text import build_task_searchable_text
from tasks.types import TaskStatus


class Task(BaseModel):
    """
    A work order.

    `searchable_text` is derived from the task's own text plus its customer
    and location and is rewritten on every save, in the same transaction.
    Soft-deleted tasks keep their text; search filters on `deleted_at`.
    """

    title = models.CharField(max_length=255, null=True, blank=True)
    description = models.TextField(null=True, blank=True)
    status = models.CharField(
        max_length=20,
        choices=choices(TaskStatus),
        default=TaskStatus.PREPARING,
    )
    customer = models.ForeignKey(
        'crm.Customer',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='tasks',
    )
    location = models.ForeignKey(
        'locations.Location',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='tasks',
    )
    scheduled_at = models.DateTimeField(null=True, blank=True)
    started_at = models.DateTimeField(null=True, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)
    deleted_at = models.DateTimeField(null=True, blank=True)

    searchable_text = models.TextField(default='', editable=False)

    class Meta:
        ordering = ['-created_at', '-id']
        indexes = [
            # (status, sort column) pairs for filtered listings
            models.Index(fields=['status', '-created_at'], name='task_status_created_idx'),
            models.Index(fields=['status', '-updated_at'], name='task_status_updated_idx'),
            models.Index(fields=['status', 'scheduled_at'], name='task_status_scheduled_idx'),
            models.Index(fields=['status', '-completed_at'], name='task_status_completed_idx'),
            # Customer task history
            models.Index(
                fields=['customer', '-created_at'],
                name='task_customer_created_idx',
                condition=models.Q(customer__isnull=False),
            ),
            models.Index(
                fields=['scheduled_at'],
                name='task_scheduled_at_idx',
                condition=models.Q(scheduled_at__isnull=False),
            ),
            # Soft delete is part of every search
            models.Index(fields=['deleted_at', 'status'], name='task_deleted_status_idx'),
            models.Index(fields=['deleted_at', '-created_at'], name='task_deleted_created_idx'),
        ]

    def __str__(self):
        return self.title or f"Task {self.pk}"

    @property
    def assignee_ids(self) -> list[str]:
        """Assignee identifiers, sorted. Uses prefetched assignments when available."""
        return sorted(assignment.assignee_id for assignment in self.assignments.all())

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    def build_searchable_text(self) -> str:
        return build_task_searchable_text(self, self.customer, self.location)

    def _locked_related(self, name: str):
        """Current row of a related record, read FOR UPDATE. `None` when unset or gone."""
        field = self._meta.get_field(name)
        related_id = getattr(self, field.attname)
        if related_id is None:
            return None
        return field.related_model._base_manager.select_for_update().filter(pk=related_id).first()

    def save(self, *args, **kwargs):
        update_fields = kwargs.get('update_fields')
        if update_fields is not None:
            kwargs['update_fields'] = {*update_fields, 'searchable_text'}

        with transaction.atomic():
            # Cached relations may predate a rename. Locking the related rows
            # before the task row matches the order of a related-record save.
            customer = self._locked_related('customer')
            location = self._locked_related('location')

            self.searchable_text = build_task_searchable_text(self, customer, location)
            super().save(*args, **kwargs)

            # A fresh row only learns its id from the insert
            text = build_task_searchable_text(self, customer, location)
            if text != self.searchable_text:
                type(self).objects.filter(pk=self.pk).update(searchable_text=text)
                self.searchable_text = text


class TaskAssignment(BaseModel):
    """One member of a task's assignee set. Assignee ids are opaque strings."""

    task = models.ForeignKey(Task, on_delete=models.CASCADE, related_name='assignments')
    assignee_id = models.CharField(max_length=64)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=['task', 'assignee_id'], name='task_assignment_unique'),
        ]
        indexes = [
            models.Index(fields=['assignee_id', 'task'], name='task_assignment_assignee_idx'),
        ]

    def __str__(self):
        return f"{self.assignee_id} -> {self.task_id}"
