"""
Celery tasks for the tasks app.

Background refresh of task searchable text after a customer or location
edit touches more tasks than can be rewritten inline.
"""
import logging

from celery import shared_task
from django.core.exceptions import ValidationError
from django.db import DatabaseError

from tasks.models import Task
from tasks.search.refresh import refresh_tasks

logger = logging.getLogger(__name__)

# 30s, 60s, 120s
RETRY_BASE_COUNTDOWN = 30
RELATIONS = ('customer', 'location')


def _retry_or_give_up(job, exc, description: str):
    retries = job.request.retries
    if retries >= job.max_retries:
        # Rows stay stale until the next write or a backfill run
        logger.error(
            f"Giving up on search text refresh for {description} after {retries} retries: {exc}",
            exc_info=True,
        )
        return
    countdown = RETRY_BASE_COUNTDOWN * (2 ** retries)
    logger.warning(f"Search text refresh for {description} failed, retrying in {countdown}s: {exc}")
    raise job.retry(exc=exc, countdown=countdown)


@shared_task(bind=True, max_retries=3, soft_time_limit=10 * 60, time_limit=12 * 60)
def refresh_related_tasks(self, relation: str, related_id: str):
    """Rewrite the searchable text of every task pointing at a customer or location."""
    if relation not in RELATIONS:
        logger.error(f"Unknown task relation {relation!r}, nothing refreshed")
        return 0

    description = f"{relation} {related_id}"
    try:
        queryset = Task.objects.filter(**{f'{relation}_id': related_id})
    except (ValidationError, ValueError) as exc:
        # Retrying cannot fix a malformed id
        logger.error(f"Bad {relation} id {related_id!r}, nothing refreshed: {exc}")
        return 0

    try:
        rewritten = refresh_tasks(queryset)
    except DatabaseError as exc:
        _retry_or_give_up(self, exc, description)
        return 0

    logger.info(f"Refreshed search text of {rewritten} tasks for {description}")
    return rewritten


@shared_task(bind=True, max_retries=3, soft_time_limit=10 * 60, time_limit=12 * 60)
def refresh_tasks_by_id(self, task_ids: list):
    """Rewrite the searchable text of the given tasks."""
    description = f"{len(task_ids)} tasks"
    try:
        rewritten = refresh_tasks(Task.objects.filter(pk__in=task_ids))
    except DatabaseError as exc:
        _retry_or_give_up(self, exc, description)
        return 0

    logger.info(f"Refreshed search text of {rewritten} of {description}")
    return rewritten
