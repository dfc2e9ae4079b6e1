"""
Keyset pagination over (sort column, id).

Rows are ordered by the sort column with NULLs last, then by id in the same
direction, so the order is total and a cursor pins an exact position. Each
page fetches one extra row to learn whether another page follows. Cursors
are opaque to clients: URL-safe base64 of compact JSON
``{"k": sort key, "v": sort value, "id": task id}``.
"""
import base64
import binascii
import json
from dataclasses import dataclass
from datetime import datetime
from typing import Any, List, Optional

from django.db.models import F, Q
from django.utils.dateparse import parse_datetime

from tasks.types import SortField, SortOrder
from .exceptions import InvalidCursorError


@dataclass(frozen=True)
class Cursor:
    sort_by: SortField
    value: Any
    id: int

    def encode(self) -> str:
        value = self.value
        if isinstance(value, datetime):
            value = value.isoformat()
        payload = json.dumps({'k': str(self.sort_by), 'v': value, 'id': self.id}, separators=(',', ':'))
        return base64.urlsafe_b64encode(payload.encode('utf-8')).decode('ascii').rstrip('=')

    @classmethod
    def decode(cls, token: str, sort_by: Optional[SortField] = None) -> "Cursor":
        """
        Parse a cursor token. With `sort_by`, also check that the cursor was
        issued for that sort key.
        """
        try:
            padded = token + '=' * (-len(token) % 4)
            raw = base64.urlsafe_b64decode(padded.encode('ascii'))
            payload = json.loads(raw.decode('utf-8'))
        except (binascii.Error, UnicodeError, ValueError) as exc:
            raise InvalidCursorError("Cursor is not valid") from exc

        if not isinstance(payload, dict):
            raise InvalidCursorError("Cursor is not valid")
        try:
            key = SortField(payload['k'])
            row_id = payload['id']
        except (KeyError, TypeError, ValueError) as exc:
            raise InvalidCursorError("Cursor is not valid") from exc
        if not isinstance(row_id, int) or isinstance(row_id, bool):
            raise InvalidCursorError("Cursor is not valid")
        if sort_by is not None and key != sort_by:
            raise InvalidCursorError(f"Cursor was issued for sortBy={key}, not sortBy={sort_by}")

        return cls(sort_by=key, value=_decode_value(key, payload.get('v')), id=row_id)

    @classmethod
    def for_row(cls, row, sort_by: SortField) -> "Cursor":
        return cls(sort_by=sort_by, value=getattr(row, sort_by.column), id=row.pk)


def _decode_value(sort_by: SortField, value):
    if value is None:
        if sort_by in (SortField.SCHEDULED_AT, SortField.COMPLETED_AT):
            return None
        raise InvalidCursorError("Cursor is not valid")

    if sort_by == SortField.ID:
        if not isinstance(value, int) or isinstance(value, bool):
            raise InvalidCursorError("Cursor is not valid")
        return value

    parsed = parse_datetime(value) if isinstance(value, str) else None
    if parsed is None:
        raise InvalidCursorError("Cursor is not valid")
    return parsed


@dataclass
class Page:
    items: List[Any]
    next_cursor: Optional[str]
    has_next_page: bool


def ordering(sort_by: SortField, sort_order: SortOrder) -> list:
    descending = sort_order == SortOrder.DESC
    if sort_by == SortField.ID:
        return ['-id' if descending else 'id']
    column = F(sort_by.column)
    primary = column.desc(nulls_last=True) if descending else column.asc(nulls_last=True)
    return [primary, '-id' if descending else 'id']


def after_cursor(cursor: Cursor, sort_order: SortOrder) -> Q:
    """Rows strictly after `cursor` in the (column NULLS LAST, id) order."""
    past = 'lt' if sort_order == SortOrder.DESC else 'gt'

    if cursor.sort_by == SortField.ID:
        return Q(**{f'id__{past}': cursor.id})

    column = cursor.sort_by.column
    if cursor.value is None:
        # Already inside the trailing NULL block
        return Q(**{f'{column}__isnull': True, f'id__{past}': cursor.id})

    return (
        Q(**{f'{column}__{past}': cursor.value})
        | Q(**{column: cursor.value, f'id__{past}': cursor.id})
        | Q(**{f'{column}__isnull': True})
    )


def paginate(queryset, sort_by: SortField, sort_order: SortOrder, cursor: Optional[str], page_size: int) -> Page:
    """
    Return one page of `queryset`.

    Raises:
        InvalidCursorError: `cursor` does not decode or was issued for another sort key
    """
    if cursor:
        position = Cursor.decode(cursor, sort_by)
        queryset = queryset.filter(after_cursor(position, sort_order))

    rows = list(queryset.order_by(*ordering(sort_by, sort_order))[:page_size + 1])
    has_next_page = len(rows) > page_size
    items = rows[:page_size]
    next_cursor = Cursor.for_row(items[-1], sort_by).encode() if has_next_page else None
    return Page(items=items, next_cursor=next_cursor, has_next_page=has_next_page)
