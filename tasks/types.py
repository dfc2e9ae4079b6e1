"""
Type definitions for the tasks app.
"""
from enum import StrEnum


class TaskStatus(StrEnum):
    PREPARING = "PREPARING"
    READY = "READY"
    IN_PROGRESS = "IN_PROGRESS"
    ON_HOLD = "ON_HOLD"
    COMPLETED = "COMPLETED"


class SortField(StrEnum):
    """Sort keys accepted by the search endpoint (wire names)."""

    SCHEDULED_AT = "scheduledAt"
    CREATED_AT = "createdAt"
    UPDATED_AT = "updatedAt"
    COMPLETED_AT = "completedAt"
    ID = "id"

    @property
    def column(self) -> str:
        return _SORT_COLUMNS[self]


_SORT_COLUMNS = {
    SortField.SCHEDULED_AT: "scheduled_at",
    SortField.CREATED_AT: "created_at",
    SortField.UPDATED_AT: "updated_at",
    SortField.COMPLETED_AT: "completed_at",
    SortField.ID: "id",
}


class SortOrder(StrEnum):
    ASC = "asc"
    DESC = "desc"


class SearchScope(StrEnum):
    """Which tasks a caller asks to see: everything they may manage, or only their own."""

    ALL = "all"
    MINE = "mine"
