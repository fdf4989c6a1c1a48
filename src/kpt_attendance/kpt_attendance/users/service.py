from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Optional

from ..access.actor import Actor, actor_from_user
from ..core.enums import Branch, Role
from ..core.exceptions import AuthenticationError, ValidationError
from ..store.repository import AuditSink, DirectoryStore
from .model import User

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid username or password"


@dataclass(frozen=True)
class SessionUser:
    """What we store into Flask session after login."""

    user_id: str
    name: str
    role: Role
    department: Optional[Branch]

    def to_session(self) -> dict:
        return {
            "user_id": self.user_id,
            "name": self.name,
            "role": self.role.value,
            "department": self.department.value if self.department else None,
        }


class AuthService:
    """Use case: authenticate user (login)."""

    def __init__(self, store: DirectoryStore):
        self._store = store

    def authenticate(self, username: str, password: str) -> SessionUser:
        wanted_username = (username or "").strip().lower()
        wanted_password = (password or "").strip()

        # Always read fresh: passwords can change between logins.
        for user in self._store.get_users():
            if user.username.strip().lower() != wanted_username:
                continue
            if (user.password or "").strip() != wanted_password:
                continue
            # Reject accounts whose role/department combination is invalid.
            try:
                actor_from_user(user)
            except ValidationError:
                logger.warning("Login refused for %s: account has no department", user.username)
                break
            return SessionUser(user_id=user.id, name=user.name, role=user.role, department=user.department)

        raise AuthenticationError(INVALID_CREDENTIALS)


class UserService:
    """Use case: account settings."""

    def __init__(self, store: DirectoryStore, audit: AuditSink):
        self._store = store
        self._audit = audit

    def change_password(self, actor: Actor, *, new_password: str, confirm_password: str) -> None:
        if not new_password:
            raise ValidationError("Password cannot be empty")
        if new_password != confirm_password:
            raise ValidationError("Passwords do not match")

        users = self._store.get_users()
        idx = next((i for i, u in enumerate(users) if u.id == actor.id), None)
        if idx is None:
            raise ValidationError("User profile mismatch")

        users[idx] = replace(users[idx], password=new_password)
        self._store.save_users(users)
        self._audit.log_activity(actor.name, "Changed account password")
