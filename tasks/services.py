"""
Task Service for write paths.

Every write goes through `Task.save()`, which recomputes the task's
searchable text in the same transaction as the change.
"""
import logging
from typing import Iterable, Optional

from django.db import transaction
from django.utils import timezone

from tasks.models import Task, TaskAssignment
from tasks.types import TaskStatus

logger = logging.getLogger(__name__)

# Status -> timestamp stamped the first time a task enters it
STATUS_TIMESTAMPS = {
    TaskStatus.IN_PROGRESS: 'started_at',
    TaskStatus.COMPLETED: 'completed_at',
}


class TaskService:
    """
    Service for creating and changing tasks.

    Provides:
    - Task creation with its assignee set
    - Field and status updates
    - Assignee replacement
    - Soft delete
    """

    EDITABLE_FIELDS = ('title', 'description', 'customer', 'location', 'scheduled_at')

    @staticmethod
    @transaction.atomic
    def create_task(
        *,
        title: Optional[str] = None,
        description: Optional[str] = None,
        status: TaskStatus = TaskStatus.PREPARING,
        customer=None,
        location=None,
        scheduled_at=None,
        assignee_ids: Iterable[str] = (),
    ) -> Task:
        """
        Create a task and its assignments in one transaction.

        Returns:
            The new Task; its searchable text already includes its id
        """
        task = Task.objects.create(
            title=title,
            description=description,
            status=status,
            customer=customer,
            location=location,
            scheduled_at=scheduled_at,
        )
        TaskService._replace_assignments(task, assignee_ids)
        logger.info(f"Created task {task.pk}")
        return task

    @staticmethod
    @transaction.atomic
    def update_task(task: Task, **changes) -> Task:
        """
        Update editable fields of a task.

        Raises:
            ValueError: if a field is not editable
        """
        unknown = set(changes) - set(TaskService.EDITABLE_FIELDS)
        if unknown:
            raise ValueError(f"Fields cannot be updated: {', '.join(sorted(unknown))}")

        for name, value in changes.items():
            setattr(task, name, value)
        task.save(update_fields=[*changes, 'updated_at'])
        return task

    @staticmethod
    @transaction.atomic
    def update_status(task: Task, status: TaskStatus) -> Task:
        """Move a task to `status`, stamping started/completed times on first entry."""
        status = TaskStatus(status)
        update_fields = ['status', 'updated_at']
        timestamp_field = STATUS_TIMESTAMPS.get(status)
        if timestamp_field and getattr(task, timestamp_field) is None:
            setattr(task, timestamp_field, timezone.now())
            update_fields.append(timestamp_field)

        previous = task.status
        task.status = status
        task.save(update_fields=update_fields)
        logger.info(f"Task {task.pk} status {previous} -> {status}")
        return task

    @staticmethod
    @transaction.atomic
    def set_assignees(task: Task, assignee_ids: Iterable[str]) -> Task:
        """Replace the assignee set of a task."""
        TaskService._replace_assignments(task, assignee_ids)
        # Bumps updated_at so the change shows up in updatedAt sorting
        task.save(update_fields=['updated_at'])
        return task

    @staticmethod
    @transaction.atomic
    def soft_delete(task: Task) -> Task:
        """Hide a task from search. Its searchable text is kept."""
        if task.deleted_at is None:
            task.deleted_at = timezone.now()
            task.save(update_fields=['deleted_at', 'updated_at'])
            logger.info(f"Soft-deleted task {task.pk}")
        return task

    @staticmethod
    def _replace_assignments(task: Task, assignee_ids: Iterable[str]):
        wanted = {str(assignee_id) for assignee_id in assignee_ids if assignee_id is not None and str(assignee_id)}
        current = set(task.assignments.values_list('assignee_id', flat=True))

        stale = current - wanted
        if stale:
            task.assignments.filter(assignee_id__in=stale).delete()
        TaskAssignment.objects.bulk_create(
            [TaskAssignment(task=task, assignee_id=assignee_id) for assignee_id in sorted(wanted - current)]
        )
        # Drop any prefetched assignments
        getattr(task, '_prefetched_objects_cache', {}).pop('assignments', None)
