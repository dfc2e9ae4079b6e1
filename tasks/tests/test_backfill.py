"""
Tests for the searchable text backfill (migration hook and management command).
"""
from io import StringIO
from unittest.mock import Mock

from django.apps import apps
from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import SimpleTestCase, TestCase

from crm.models import Customer
from locations.models import Location
from tasks.models import Task
from tasks.search.backfill import backfill_all, backfill_tasks
from tasks.search.indexes import TRIGRAM_INDEXES, create_trigram_indexes, drop_trigram_indexes
from tasks.tests.helpers import make_task


class BackfillCommandTests(TestCase):
    def setUp(self):
        self.customer = Customer.objects.create(name="Phạm", phone="0933")
        self.location = Location.objects.create(name="Xưởng", address=None, lat=0.0, lng=0.0)
        self.task = make_task("Lắp đặt", customer=self.customer, location=self.location)
        self.expected_task_text = f"{self.task.pk} lap dat pham 0933 xuong"

        # Rows written before the column existed
        Task.objects.update(searchable_text='')
        Customer.objects.update(searchable_text=None)
        Location.objects.update(searchable_text=None)

    def run_command(self, *args):
        out = StringIO()
        call_command('backfill_searchable_text', *args, stdout=out)
        return out.getvalue()

    def test_fills_missing_text(self):
        output = self.run_command()

        self.task.refresh_from_db()
        self.customer.refresh_from_db()
        self.location.refresh_from_db()
        self.assertEqual(self.task.searchable_text, self.expected_task_text)
        self.assertEqual(self.customer.searchable_text, "pham 0933")
        self.assertEqual(self.location.searchable_text, "xuong")
        self.assertIn('task: 1 rows updated', output)

    def test_idempotent(self):
        self.run_command()
        output = self.run_command()
        self.assertIn('task: 0 rows updated', output)
        self.assertIn('customer: 0 rows updated', output)

    def test_dry_run_writes_nothing(self):
        output = self.run_command('--dry-run')
        self.task.refresh_from_db()
        self.assertEqual(self.task.searchable_text, '')
        self.assertIn('task: 1 rows would change', output)
        self.assertIn('DRY RUN', output)

    def test_only_missing_rows_by_default(self):
        Task.objects.update(searchable_text='stale but present')
        self.run_command('--model', 'task')
        self.task.refresh_from_db()
        self.assertEqual(self.task.searchable_text, 'stale but present')

    def test_all_rebuilds_stale_rows(self):
        Task.objects.update(searchable_text='stale but present')
        self.run_command('--all', '--model', 'task', '--batch-size', '1')
        self.task.refresh_from_db()
        self.assertEqual(self.task.searchable_text, self.expected_task_text)

    def test_model_selection(self):
        self.run_command('--model', 'customer')
        self.customer.refresh_from_db()
        self.location.refresh_from_db()
        self.assertEqual(self.customer.searchable_text, "pham 0933")
        self.assertIsNone(self.location.searchable_text)

    def test_rejects_bad_batch_size(self):
        with self.assertRaises(CommandError):
            self.run_command('--batch-size', '0')

    def test_migration_hook(self):
        backfill_all(apps, schema_editor=None)
        self.task.refresh_from_db()
        self.assertEqual(self.task.searchable_text, self.expected_task_text)

    def test_batches_cover_every_row(self):
        for index in range(4):
            make_task(f"Job {index}")
        Task.objects.update(searchable_text='')

        self.assertEqual(backfill_tasks(Task, batch_size=2), 5)
        self.assertFalse(Task.objects.filter(searchable_text='').exists())


class TrigramIndexTests(SimpleTestCase):
    def schema_editor(self, vendor):
        editor = Mock()
        editor.connection.vendor = vendor
        editor.quote_name = lambda name: f'"{name}"'
        return editor

    def test_create_sql(self):
        editor = self.schema_editor('postgresql')
        index = TRIGRAM_INDEXES[0]
        self.assertEqual(
            index.create_sql(editor),
            'CREATE INDEX IF NOT EXISTS "task_searchable_text_trgm" '
            'ON "tasks_task" USING GIN ("searchable_text" gin_trgm_ops)',
        )

    def test_postgres_creates_extension_and_indexes(self):
        editor = self.schema_editor('postgresql')
        create_trigram_indexes(None, editor)
        statements = [call.args[0] for call in editor.execute.call_args_list]
        self.assertEqual(statements[0], "CREATE EXTENSION IF NOT EXISTS pg_trgm")
        self.assertEqual(len(statements), len(TRIGRAM_INDEXES) + 1)

    def test_drop(self):
        editor = self.schema_editor('postgresql')
        drop_trigram_indexes(None, editor)
        self.assertEqual(editor.execute.call_count, len(TRIGRAM_INDEXES))

    def test_other_backends_skipped(self):
        editor = self.schema_editor('sqlite')
        create_trigram_indexes(None, editor)
        drop_trigram_indexes(None, editor)
        editor.execute.assert_not_called()
