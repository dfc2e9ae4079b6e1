"""
Filter spec to ORM predicate.

A clause is added only when its operand is known. Missing inputs leave the
predicate smaller; they never add a comparison against `None`. In
particular the id clause exists only when the query really is an id, so it
can never turn the text/id disjunction into "match everything" (or nothing).
"""
import operator
import re
from functools import reduce
from typing import Iterator, List, Optional, Tuple

from django.db.models import Q

from tasks.models import TaskAssignment
from .filters import FilterSpec
from .normalizer import TextNormalizer, get_normalizer

# Ids are shown as "CV042" in the mobile client
_TASK_ID_RE = re.compile(r"^(?:cv)?(\d+)$")
MAX_TASK_ID = 2 ** 63 - 1

DATE_COLUMNS = (
    ('scheduled_at', 'scheduled'),
    ('created_at', 'created'),
    ('completed_at', 'completed'),
)


def parse_task_id(normalized_query: str) -> Optional[int]:
    """Return the task id a normalized query names, if it names one."""
    match = _TASK_ID_RE.match(normalized_query)
    if match is None:
        return None
    value = int(match.group(1))
    if value > MAX_TASK_ID:
        return None
    return value


def assigned_to(assignee_ids) -> Q:
    """Tasks with at least one of `assignee_ids` in their assignee set."""
    if isinstance(assignee_ids, str):
        assignee_ids = [assignee_ids]
    assignments = TaskAssignment.objects.filter(assignee_id__in=sorted(assignee_ids))
    return Q(pk__in=assignments.values('task_id'))


def search_clause(query: Optional[str], normalizer: Optional[TextNormalizer] = None) -> Optional[Q]:
    """
    Text clause for a free-text query, or None when the query normalizes to
    nothing. Matches on the derived text only, never on source columns.
    """
    normalizer = normalizer or get_normalizer()
    normalized = normalizer.normalize(query)
    if not normalized:
        return None

    clause = Q(searchable_text__contains=normalized)
    task_id = parse_task_id(normalized)
    if task_id is not None:
        clause |= Q(pk=task_id)
    return clause


def build_clauses(spec: FilterSpec, normalizer: Optional[TextNormalizer] = None) -> List[Q]:
    clauses = [Q(deleted_at__isnull=True)]

    text = search_clause(spec.search, normalizer)
    if text is not None:
        clauses.append(text)

    if spec.statuses:
        clauses.append(Q(status__in=sorted(spec.statuses)))

    if spec.assignee_ids:
        clauses.append(assigned_to(spec.assignee_ids))

    if spec.customer_id is not None:
        clauses.append(Q(customer_id=spec.customer_id))

    for column, attr in DATE_COLUMNS:
        date_range = getattr(spec, attr)
        if date_range.start is not None:
            clauses.append(Q(**{f'{column}__gte': date_range.start}))
        if date_range.end is not None:
            clauses.append(Q(**{f'{column}__lte': date_range.end}))

    return clauses


def build_predicate(spec: FilterSpec, normalizer: Optional[TextNormalizer] = None) -> Q:
    """AND of every clause the spec defines. Always excludes soft-deleted tasks."""
    return reduce(operator.and_, build_clauses(spec, normalizer))


def iter_conditions(predicate: Q) -> Iterator[Tuple[str, object]]:
    """Yield every (lookup, operand) leaf of a Q tree."""
    for child in predicate.children:
        if isinstance(child, Q):
            yield from iter_conditions(child)
        else:
            yield child


def describe_predicate(predicate: Q) -> str:
    """Shape of a predicate for logs: connectors and lookups, no values."""
    parts = []
    for child in predicate.children:
        if isinstance(child, Q):
            parts.append(describe_predicate(child))
        else:
            parts.append(child[0])
    shape = f" {predicate.connector} ".join(parts)
    if predicate.negated:
        return f"NOT ({shape})"
    return f"({shape})"
