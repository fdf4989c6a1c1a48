from __future__ import annotations

from typing import Sequence

from ..access.actor import Actor
from ..access.policy import ensure_role
from ..core.constants import AUDIT_LOG_LIMIT
from ..core.enums import Role
from ..store.repository import AuditSink
from .model import ActivityEntry

AUDIT_REVIEW_ROLES = frozenset({Role.SUPER_ADMIN, Role.PRINCIPAL})


class AuditService:
    def __init__(self, audit: AuditSink):
        self._audit = audit

    def recent(self, actor: Actor, *, limit: int = AUDIT_LOG_LIMIT) -> Sequence[ActivityEntry]:
        ensure_role(actor, AUDIT_REVIEW_ROLES, "Activity logs are restricted to administrators")
        return self._audit.list_activity(limit=min(max(int(limit), 1), AUDIT_LOG_LIMIT))
