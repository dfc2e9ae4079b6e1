"""
Value types describing a search request after validation.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import FrozenSet, Optional
from uuid import UUID

from accounts.types import UserRole
from tasks.types import SearchScope, SortField, SortOrder


@dataclass(frozen=True)
class DateRange:
    """Inclusive bounds on one timestamp column. Either end may be open."""

    start: Optional[datetime] = None
    end: Optional[datetime] = None


@dataclass(frozen=True)
class FilterSpec:
    """
    A validated search request.

    `search` holds the raw query; normalization happens when the predicate
    is built. Empty collections and `None` both mean "no filter".
    """

    search: Optional[str] = None
    statuses: FrozenSet[str] = frozenset()
    assignee_ids: FrozenSet[str] = frozenset()
    customer_id: Optional[UUID] = None
    scheduled: DateRange = field(default_factory=DateRange)
    created: DateRange = field(default_factory=DateRange)
    completed: DateRange = field(default_factory=DateRange)
    sort_by: SortField = SortField.CREATED_AT
    sort_order: SortOrder = SortOrder.DESC
    scope: SearchScope = SearchScope.ALL
    cursor: Optional[str] = None
    page_size: int = 20


@dataclass(frozen=True)
class Principal:
    """The authenticated caller, as far as search is concerned."""

    principal_id: str
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @classmethod
    def from_user(cls, user) -> "Principal":
        return cls(principal_id=str(user.pk), role=UserRole(user.role))
