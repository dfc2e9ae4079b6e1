"""
Tests for TaskService write paths.
"""
from django.test import TestCase

from tasks.models import Task, TaskAssignment
from tasks.services import TaskService
from tasks.tests.helpers import make_task
from tasks.types import TaskStatus


class TaskServiceTests(TestCase):
    def test_create_with_assignees(self):
        task = TaskService.create_task(title="Job", assignee_ids=["3", "1", "3", ""])
        self.assertEqual(task.assignee_ids, ["1", "3"])
        self.assertEqual(task.status, TaskStatus.PREPARING)

    def test_set_assignees_replaces_set(self):
        task = make_task("Job", assignees=["1", "2"])
        TaskService.set_assignees(task, ["2", "5"])
        self.assertEqual(
            sorted(TaskAssignment.objects.filter(task=task).values_list('assignee_id', flat=True)),
            ["2", "5"],
        )
        self.assertEqual(task.assignee_ids, ["2", "5"])

    def test_set_assignees_prefetched_cache_dropped(self):
        make_task("Job", assignees=["1"])
        task = Task.objects.prefetch_related('assignments').get()
        self.assertEqual(task.assignee_ids, ["1"])
        TaskService.set_assignees(task, ["9"])
        self.assertEqual(task.assignee_ids, ["9"])

    def test_update_status_stamps_timestamps_once(self):
        task = make_task("Job")
        TaskService.update_status(task, TaskStatus.IN_PROGRESS)
        started_at = task.started_at
        self.assertIsNotNone(started_at)

        TaskService.update_status(task, TaskStatus.ON_HOLD)
        TaskService.update_status(task, TaskStatus.IN_PROGRESS)
        TaskService.update_status(task, TaskStatus.COMPLETED)

        task.refresh_from_db()
        self.assertEqual(task.started_at, started_at)
        self.assertIsNotNone(task.completed_at)
        self.assertEqual(task.status, TaskStatus.COMPLETED)

    def test_update_status_rejects_unknown(self):
        task = make_task("Job")
        with self.assertRaises(ValueError):
            TaskService.update_status(task, "DONE")

    def test_update_task_rejects_non_editable_fields(self):
        task = make_task("Job")
        with self.assertRaises(ValueError):
            TaskService.update_task(task, searchable_text="hacked")

    def test_soft_delete_is_idempotent(self):
        task = make_task("Job")
        TaskService.soft_delete(task)
        deleted_at = task.deleted_at
        TaskService.soft_delete(task)
        task.refresh_from_db()
        self.assertEqual(task.deleted_at, deleted_at)
        self.assertTrue(task.is_deleted)
