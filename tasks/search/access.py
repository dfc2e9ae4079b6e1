"""
Visibility scoping.

Which tasks a caller sees depends on their role and on the scope they ask
for. Workers only ever see tasks assigned to them, whatever they ask for.
Admins see everything, or only their own assignments when they ask for
`SearchScope.MINE` (the personal worklist).
"""
from typing import Optional

from django.db.models import Q

from tasks.types import SearchScope
from .filters import Principal
from .predicates import assigned_to


def restricts_to_own_tasks(principal: Principal, scope: SearchScope) -> bool:
    return not principal.is_admin or scope == SearchScope.MINE


def visibility_clause(principal: Principal, scope: SearchScope) -> Optional[Q]:
    """The clause limiting `principal` to their tasks, or None when unrestricted."""
    if restricts_to_own_tasks(principal, scope):
        return assigned_to(principal.principal_id)
    return None


def scope_predicate(predicate: Q, principal: Principal, scope: SearchScope) -> Q:
    clause = visibility_clause(principal, scope)
    if clause is None:
        return predicate
    return predicate & clause
