"""
Builders for the derived `searchable_text` columns.

These are pure functions over model instances (or anything with the same
attributes); persisting the result is the job of `tasks.search.refresh`.
"""
from typing import Any, Iterable, Optional

from .normalizer import TextNormalizer, get_normalizer


def join_searchable_parts(parts: Iterable[Any], normalizer: Optional[TextNormalizer] = None) -> str:
    """Normalize each non-empty part on its own and join them with single spaces."""
    normalizer = normalizer or get_normalizer()
    normalized = []
    for part in parts:
        if part is None:
            continue
        text = str(part).strip()
        if not text:
            continue
        value = normalizer.normalize(text)
        if value:
            normalized.append(value)
    return " ".join(normalized)


def build_task_searchable_text(task, customer=None, location=None, normalizer: Optional[TextNormalizer] = None) -> str:
    """
    Build the searchable text of a task.

    Order: id, title, description, customer name, customer phone,
    location address, location name. The id is missing only before the
    row's first insert.
    """
    parts = [task.pk, task.title, task.description]
    if customer is not None:
        parts.extend([customer.name, customer.phone])
    if location is not None:
        parts.extend([location.address, location.name])
    return join_searchable_parts(parts, normalizer)


def build_customer_searchable_text(customer, normalizer: Optional[TextNormalizer] = None) -> Optional[str]:
    return join_searchable_parts([customer.name, customer.phone], normalizer) or None


def build_location_searchable_text(location, normalizer: Optional[TextNormalizer] = None) -> Optional[str]:
    return join_searchable_parts([location.name, location.address], normalizer) or None
