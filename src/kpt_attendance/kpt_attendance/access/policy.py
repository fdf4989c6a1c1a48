"""Department partitioning rules shared by every read and write path."""

from __future__ import annotations

from typing import Optional

from ..core.enums import Branch, Role
from ..core.exceptions import AuthorizationError
from .actor import Actor

_UNRESTRICTED_ROLES = frozenset({Role.SUPER_ADMIN, Role.PRINCIPAL})
_SCOPED_ROLES = frozenset({Role.HOD, Role.FACULTY})


def can_access(actor_role: Role, actor_department: Optional[Branch], target_department: Optional[Branch]) -> bool:
    """Return True when an actor of `actor_role` may see `target_department`.

    Pure and total: unknown roles or missing departments are denied, never raised.
    """

    if actor_role in _UNRESTRICTED_ROLES:
        return True
    if actor_role in _SCOPED_ROLES:
        return actor_department is not None and target_department == actor_department
    return False


def ensure_branch_access(actor: Actor, branch: Branch) -> None:
    if can_access(actor.role, actor.department, branch):
        return
    own = actor.department.value if actor.department else None
    raise AuthorizationError(
        f"Access to {branch.value} is outside your department ({own})",
        fallback_branch=actor.department.name if actor.department else None,
    )


def ensure_role(actor: Actor, allowed: set[Role] | frozenset[Role], message: str = "You do not have permission") -> None:
    if actor.role not in allowed:
        raise AuthorizationError(message)
