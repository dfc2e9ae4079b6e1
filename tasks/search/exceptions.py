"""
Search errors.

Views turn these into responses: validation errors become 400s with field
errors, execution errors become a generic 500. Details of an execution
error stay in the server log.
"""


class SearchError(Exception):
    """Base class for search failures."""


class SearchValidationError(SearchError):
    """The request could not be turned into a filter spec. Raised before any query runs."""

    def __init__(self, errors):
        self.errors = errors
        super().__init__(f"Invalid search request: {errors}")


class InvalidCursorError(ValueError):
    """A pagination cursor that does not decode, or belongs to another sort key."""


class SearchExecutionError(SearchError):
    """The storage layer failed while running a search."""

    default_message = "Search failed. Please try again later."

    def __init__(self, message: str = None):
        super().__init__(message or self.default_message)
