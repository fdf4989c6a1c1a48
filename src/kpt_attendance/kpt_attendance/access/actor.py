"""Acting-user identity.

An actor is one of four variants. HOD and faculty actors always carry a
department; super admin and principal actors never do.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Mapping, Optional, Union

from ..core.enums import Branch, Role
from ..core.exceptions import ValidationError
from ..users.model import User


@dataclass(frozen=True)
class SuperAdminActor:
    id: str
    name: str

    role: ClassVar[Role] = Role.SUPER_ADMIN
    department: ClassVar[Optional[Branch]] = None


@dataclass(frozen=True)
class PrincipalActor:
    id: str
    name: str

    role: ClassVar[Role] = Role.PRINCIPAL
    department: ClassVar[Optional[Branch]] = None


@dataclass(frozen=True)
class HodActor:
    id: str
    name: str
    department: Branch

    role: ClassVar[Role] = Role.HOD


@dataclass(frozen=True)
class FacultyActor:
    id: str
    name: str
    department: Branch

    role: ClassVar[Role] = Role.FACULTY


Actor = Union[SuperAdminActor, PrincipalActor, HodActor, FacultyActor]


def make_actor(*, id: str, name: str, role: Role | str, department: Branch | str | None = None) -> Actor:
    role = Role(role)
    if role == Role.SUPER_ADMIN:
        return SuperAdminActor(id=id, name=name)
    if role == Role.PRINCIPAL:
        return PrincipalActor(id=id, name=name)

    if not department:
        raise ValidationError(f"{role.value} account has no department")
    dept = department if isinstance(department, Branch) else Branch(department)
    if role == Role.HOD:
        return HodActor(id=id, name=name, department=dept)
    return FacultyActor(id=id, name=name, department=dept)


def actor_from_user(user: User) -> Actor:
    return make_actor(id=user.id, name=user.name, role=user.role, department=user.department)


def actor_from_session(data: Mapping[str, object]) -> Actor:
    """Rebuild the actor stored in a Flask session after login."""

    return make_actor(
        id=str(data["user_id"]),
        name=str(data.get("name") or ""),
        role=str(data["role"]),
        department=data.get("department") or None,  # type: ignore[arg-type]
    )


def is_department_scoped(actor: Actor) -> bool:
    return actor.role in {Role.HOD, Role.FACULTY}
