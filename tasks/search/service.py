"""
Task search orchestration.

Validates a raw request, builds the predicate, applies visibility scoping,
runs the query and cuts one page. Holds no per-request state, so one
instance serves every request.
"""
import logging
from dataclasses import dataclass, replace
from typing import Any, List, Mapping, Optional

from django.db import DatabaseError

from tasks.models import Task
from .access import scope_predicate
from .config import SearchConfig, get_search_config
from .exceptions import InvalidCursorError, SearchExecutionError, SearchValidationError
from .filters import FilterSpec, Principal
from .normalizer import TextNormalizer
from .pagination import paginate
from .predicates import build_predicate, describe_predicate

logger = logging.getLogger(__name__)
audit_logger = logging.getLogger('tasks.audit')


@dataclass
class SearchResult:
    items: List[Task]
    next_cursor: Optional[str]
    has_next_page: bool


class TaskSearchService:
    """
    Entry point for task search.

    Usage:
        service = get_task_search_service()
        result = service.search(Principal.from_user(request.user), params)
    """

    def __init__(self, config: Optional[SearchConfig] = None, normalizer: Optional[TextNormalizer] = None):
        self.config = config or get_search_config()
        self.normalizer = normalizer or TextNormalizer(self.config.substitutions)

    def parse(self, params: Mapping[str, Any]) -> FilterSpec:
        """
        Validate raw request parameters (wire names) into a FilterSpec.

        Raises:
            SearchValidationError: with DRF-style field errors
        """
        from tasks.serializers import TaskSearchQuerySerializer

        serializer = TaskSearchQuerySerializer(data=params, config=self.config)
        if not serializer.is_valid():
            raise SearchValidationError(serializer.errors)
        return serializer.to_filter_spec()

    def search(self, principal: Principal, params: Mapping[str, Any]) -> SearchResult:
        return self.search_spec(principal, self.parse(params))

    def search_spec(self, principal: Principal, spec: FilterSpec) -> SearchResult:
        """
        Run an already validated search.

        Raises:
            SearchValidationError: page size out of bounds or unusable cursor
            SearchExecutionError: the database failed
        """
        if not self.config.min_page_size <= spec.page_size <= self.config.max_page_size:
            raise SearchValidationError({
                'pageSize': [
                    f"Must be between {self.config.min_page_size} and {self.config.max_page_size}."
                ],
            })

        spec = self.enforce_assignee_filter(principal, spec)
        predicate = scope_predicate(build_predicate(spec, self.normalizer), principal, spec.scope)
        queryset = (
            Task.objects.filter(predicate)
            .select_related('customer', 'location')
            .prefetch_related('assignments')
        )

        try:
            page = paginate(queryset, spec.sort_by, spec.sort_order, spec.cursor, spec.page_size)
        except InvalidCursorError as e:
            raise SearchValidationError({'cursor': [str(e)]}) from e
        except DatabaseError as e:
            logger.error(
                f"Task search failed: principal={principal.principal_id} role={principal.role} "
                f"scope={spec.scope} predicate={describe_predicate(predicate)} "
                f"sort={spec.sort_by}:{spec.sort_order} cursor={spec.cursor!r} page_size={spec.page_size}: {e}",
                exc_info=True,
            )
            raise SearchExecutionError() from e

        return SearchResult(items=page.items, next_cursor=page.next_cursor, has_next_page=page.has_next_page)

    @staticmethod
    def enforce_assignee_filter(principal: Principal, spec: FilterSpec) -> FilterSpec:
        """
        Drop an assignee filter sent by a non-admin. Their own-task scope
        applies regardless; the client is not told.
        """
        if principal.is_admin or not spec.assignee_ids:
            return spec
        audit_logger.warning(
            f"Ignored assigneeIds filter {sorted(spec.assignee_ids)} from non-admin "
            f"principal {principal.principal_id}"
        )
        return replace(spec, assignee_ids=frozenset())


_search_service: Optional[TaskSearchService] = None


def get_task_search_service() -> TaskSearchService:
    """Get the shared search service instance."""
    global _search_service
    if _search_service is None:
        _search_service = TaskSearchService()
    return _search_service
