"""
Batch rewriting of `searchable_text` columns.

Used by the backfill migration (with historical models), the
`backfill_searchable_text` management command and cascade refreshes. Works
on any queryset whose model has a `searchable_text` field; it never imports
the live models so migrations can call it safely.
"""
import logging
from typing import Callable, Optional

from django.db import transaction
from django.db.models import Q

from .searchable_text import (
    build_customer_searchable_text,
    build_location_searchable_text,
    build_task_searchable_text,
)

logger = logging.getLogger(__name__)


def rewrite_searchable_text(
    queryset,
    build: Callable[[object], Optional[str]],
    batch_size: int = 200,
    *,
    dry_run: bool = False,
    lock_rows: bool = False,
) -> int:
    """
    Recompute `searchable_text` for every row of `queryset`, in primary-key
    chunks of `batch_size`. Each chunk is read and written in its own
    transaction (nested into the caller's when there is one); with
    `lock_rows` the chunk is read with SELECT ... FOR UPDATE.

    Returns the number of rows whose text changed (or would change, on a dry run).
    """
    model = queryset.model
    queryset = queryset.order_by('pk')
    last_pk = None
    rewritten = 0

    while True:
        with transaction.atomic():
            chunk = queryset if last_pk is None else queryset.filter(pk__gt=last_pk)
            if lock_rows:
                chunk = chunk.select_for_update(of=('self',))
            batch = list(chunk[:batch_size])
            if not batch:
                break
            last_pk = batch[-1].pk

            stale = []
            for obj in batch:
                text = build(obj)
                if text != obj.searchable_text:
                    obj.searchable_text = text
                    stale.append(obj)

            if stale and not dry_run:
                model._base_manager.bulk_update(stale, ['searchable_text'])
            rewritten += len(stale)

    return rewritten


def missing_text_filter() -> Q:
    """Rows that were never populated."""
    return Q(searchable_text__isnull=True) | Q(searchable_text='')


def backfill_customers(Customer, *, only_missing=True, batch_size=200, dry_run=False) -> int:
    queryset = Customer._base_manager.all()
    if only_missing:
        queryset = queryset.filter(missing_text_filter())
    return rewrite_searchable_text(queryset, build_customer_searchable_text, batch_size, dry_run=dry_run)


def backfill_locations(Location, *, only_missing=True, batch_size=200, dry_run=False) -> int:
    queryset = Location._base_manager.all()
    if only_missing:
        queryset = queryset.filter(missing_text_filter())
    return rewrite_searchable_text(queryset, build_location_searchable_text, batch_size, dry_run=dry_run)


def backfill_tasks(Task, *, only_missing=True, batch_size=200, dry_run=False) -> int:
    queryset = Task._base_manager.select_related('customer', 'location')
    if only_missing:
        queryset = queryset.filter(missing_text_filter())
    return rewrite_searchable_text(
        queryset,
        lambda task: build_task_searchable_text(task, task.customer, task.location),
        batch_size,
        dry_run=dry_run,
    )


def backfill_all(apps, schema_editor):
    """
    Migration hook: populate every missing searchable text. Safe to re-run,
    rows that already have text are skipped.
    """
    Customer = apps.get_model('crm', 'Customer')
    Location = apps.get_model('locations', 'Location')
    Task = apps.get_model('tasks', 'Task')

    customers = backfill_customers(Customer)
    locations = backfill_locations(Location)
    tasks = backfill_tasks(Task)
    if customers or locations or tasks:
        logger.info(
            f"Backfilled searchable text: {customers} customers, {locations} locations, {tasks} tasks"
        )
