"""
Keeping `Task.searchable_text` in step with related customers and locations.

Small fan-outs are rewritten inline, inside the caller's transaction, so a
reader never sees a renamed customer next to stale task text. Fan-outs above
`cascade_inline_limit` are handed to a Celery job once the caller commits;
until that job finishes, the affected tasks match the old text. The job
retries with backoff and leaves every finished chunk committed.
"""
import logging
from typing import Iterable, Optional

from django.db import transaction

from tasks.models import Task
from .backfill import rewrite_searchable_text
from .config import SearchConfig, get_search_config

logger = logging.getLogger(__name__)


def refresh_tasks(queryset, batch_size: Optional[int] = None) -> int:
    """Rewrite the searchable text of every task in `queryset`, locking each chunk."""
    if batch_size is None:
        batch_size = get_search_config().cascade_batch_size
    return rewrite_searchable_text(
        queryset.select_related('customer', 'location'),
        Task.build_searchable_text,
        batch_size,
        lock_rows=True,
    )


def cascade_related_refresh(relation: str, related_id, config: Optional[SearchConfig] = None) -> int:
    """
    Refresh every task whose `relation` ('customer' or 'location') points at
    `related_id`.

    Returns the number of tasks rewritten inline, 0 when the work was deferred.
    """
    from tasks.tasks import refresh_related_tasks

    config = config or get_search_config()
    queryset = Task.objects.filter(**{f'{relation}_id': related_id})
    affected = queryset.count()
    if not affected:
        return 0

    if affected <= config.cascade_inline_limit:
        return refresh_tasks(queryset, config.cascade_batch_size)

    logger.info(f"Deferring search text refresh of {affected} tasks for {relation} {related_id}")
    related_key = str(related_id)
    transaction.on_commit(lambda: refresh_related_tasks.delay(relation, related_key))
    return 0


def refresh_task_ids(task_ids: Iterable[int], config: Optional[SearchConfig] = None) -> int:
    """Refresh the given tasks. Used when the related row no longer exists."""
    from tasks.tasks import refresh_tasks_by_id

    config = config or get_search_config()
    task_ids = sorted(set(task_ids))
    if not task_ids:
        return 0

    if len(task_ids) <= config.cascade_inline_limit:
        return refresh_tasks(Task.objects.filter(pk__in=task_ids), config.cascade_batch_size)

    logger.info(f"Deferring search text refresh of {len(task_ids)} tasks")
    transaction.on_commit(lambda: refresh_tasks_by_id.delay(task_ids))
    return 0
