"""
Management command to backfill searchable text.

Fills `searchable_text` for customers, locations and tasks that have none.
Safe to re-run: rows that already have text are skipped unless --all is
given, and rows whose text is already correct are never written.

Usage:
    python manage.py backfill_searchable_text
    python manage.py backfill_searchable_text --all
    python manage.py backfill_searchable_text --model task --batch-size 500
    python manage.py backfill_searchable_text --dry-run
"""
import logging

from django.core.management.base import BaseCommand, CommandError

from crm.models import Customer
from locations.models import Location
from tasks.models import Task
from tasks.search.backfill import backfill_customers, backfill_locations, backfill_tasks

logger = logging.getLogger(__name__)

# Related rows first so task text is built from current values
BACKFILLS = (
    ('customer', Customer, backfill_customers),
    ('location', Location, backfill_locations),
    ('task', Task, backfill_tasks),
)


class Command(BaseCommand):
    help = 'Populate searchable text for customers, locations and tasks'

    def add_arguments(self, parser):
        parser.add_argument(
            '--model',
            action='append',
            choices=[name for name, _, _ in BACKFILLS],
            help='Only backfill this model (repeatable). Defaults to all.',
        )
        parser.add_argument(
            '--all',
            action='store_true',
            dest='rebuild_all',
            help='Recompute every row, not only rows without text',
        )
        parser.add_argument(
            '--batch-size',
            type=int,
            default=200,
            help='Rows per transaction',
        )
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Count the rows that would change without writing them',
        )

    def handle(self, *args, **options):
        models = options.get('model') or [name for name, _, _ in BACKFILLS]
        rebuild_all = options.get('rebuild_all', False)
        batch_size = options.get('batch_size')
        dry_run = options.get('dry_run', False)

        if batch_size is None or batch_size < 1:
            raise CommandError('--batch-size must be at least 1')

        self.stdout.write(self.style.NOTICE('Starting searchable text backfill...'))
        if dry_run:
            self.stdout.write(self.style.WARNING('DRY RUN - No changes will be made'))

        totals = {}
        for name, model, backfill in BACKFILLS:
            if name not in models:
                continue
            count = backfill(
                model,
                only_missing=not rebuild_all,
                batch_size=batch_size,
                dry_run=dry_run,
            )
            totals[name] = count
            self.stdout.write(f'  {name}: {count} rows {"would change" if dry_run else "updated"}')

        logger.info(f"Searchable text backfill finished (dry_run={dry_run}): {totals}")

        self.stdout.write('')
        self.stdout.write(self.style.SUCCESS('Backfill complete!'))
        if dry_run:
            self.stdout.write(self.style.WARNING(
                '\nThis was a dry run. Run without --dry-run to apply changes.'
            ))
