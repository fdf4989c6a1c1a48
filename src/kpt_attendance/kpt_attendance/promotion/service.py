from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Iterable

from ..access.actor import Actor
from ..access.policy import ensure_role
from ..common.datetime_utils import now_local
from ..common.ids import new_id
from ..core.constants import TERMINAL_SEMESTER
from ..core.enums import CycleType, Role, StudentStatus
from ..core.exceptions import ValidationError
from ..store.repository import AuditSink, DirectoryStore
from ..students.model import Student
from .model import PromotionLog

logger = logging.getLogger(__name__)

PROMOTION_ROLES = frozenset({Role.SUPER_ADMIN, Role.PRINCIPAL})


@dataclass(frozen=True)
class PromotionOutcome:
    students: list[Student]
    advanced: int
    archived: int

    @property
    def affected(self) -> int:
        return self.advanced + self.archived


def apply_promotion(students: Iterable[Student]) -> PromotionOutcome:
    """Advance every active student one semester; archive those past the terminal one.

    Archived students pass through untouched. An archived-on-promotion
    student keeps its semester value.
    """

    out: list[Student] = []
    advanced = archived = 0
    for s in students:
        if s.is_archived:
            out.append(s)
            continue
        next_sem = s.semester + 1
        if next_sem > TERMINAL_SEMESTER:
            out.append(replace(s, status=StudentStatus.ARCHIVED))
            archived += 1
        else:
            out.append(replace(s, semester=next_sem))
            advanced += 1
    return PromotionOutcome(students=out, advanced=advanced, archived=archived)


def _scrub_snapshots(logs: list[PromotionLog], removed_ids: set[str]) -> list[PromotionLog]:
    return [
        replace(log, previous_states=tuple(s for s in log.previous_states if s.id not in removed_ids))
        for log in logs
    ]


class PromotionService:
    """Use cases: semester promotion with undo, and the archived-student recycle bin.

    A single lock serialises every read-snapshot-mutate-commit sequence
    in this process.
    """

    def __init__(self, store: DirectoryStore, audit: AuditSink):
        self._store = store
        self._audit = audit
        self._lock = threading.Lock()

    def list_logs(self, actor: Actor) -> list[PromotionLog]:
        ensure_role(actor, PROMOTION_ROLES, "Promotion history is restricted to the super admin or principal")
        return self._store.get_promotion_logs()

    def list_archived(self, actor: Actor) -> list[Student]:
        ensure_role(actor, PROMOTION_ROLES, "The recycle bin is restricted to the super admin or principal")
        return [s for s in self._store.get_students() if s.is_archived]

    def promote(self, actor: Actor, cycle: CycleType | str, *, now: datetime | None = None) -> PromotionLog:
        ensure_role(actor, PROMOTION_ROLES, "Only the super admin or principal can run promotions")
        try:
            cycle = CycleType(cycle)
        except ValueError:
            raise ValidationError(f"Unknown promotion cycle: {cycle!r}")

        with self._lock:
            students = self._store.get_students()
            # Frozen dataclasses in a tuple: the snapshot shares no mutable state with live data.
            snapshot = tuple(students)
            outcome = apply_promotion(students)

            log = PromotionLog(
                id=new_id(),
                date=now or now_local(),
                performed_by=actor.name,
                type=cycle,
                student_count=outcome.affected,
                previous_states=snapshot,
                advanced_count=outcome.advanced,
                archived_count=outcome.archived,
            )
            self._store.save_batch(
                students=outcome.students,
                promotion_logs=[log, *self._store.get_promotion_logs()],
            )

        self._audit.log_activity(actor.name, f"Performed Global SEM Promotion to {cycle.value} Cycle")
        logger.info(
            "Promotion %s by %s: %d advanced, %d archived",
            log.id,
            actor.name,
            outcome.advanced,
            outcome.archived,
        )
        return log

    def undo(self, actor: Actor, log_id: str) -> list[Student]:
        """Restore the directory to the snapshot of the newest promotion and drop its log."""

        ensure_role(actor, PROMOTION_ROLES, "Only the super admin or principal can undo promotions")

        with self._lock:
            logs = self._store.get_promotion_logs()
            target = next((log for log in logs if log.id == log_id), None)
            if target is None:
                raise ValidationError("Promotion log not found")
            if logs[0].id != log_id:
                raise ValidationError("Only the most recent promotion can be undone")

            restored = list(target.previous_states)
            self._store.save_batch(students=restored, promotion_logs=logs[1:])

        self._audit.log_activity(actor.name, f"Undid Promotion from {target.date.strftime('%Y-%m-%d')}")
        logger.info("Promotion %s undone by %s", log_id, actor.name)
        return restored

    def restore(self, actor: Actor, student_id: str) -> Student:
        """Bring an archived student back as active in the terminal semester."""

        ensure_role(actor, PROMOTION_ROLES, "Only the super admin or principal can restore students")

        with self._lock:
            students = self._store.get_students()
            current = next((s for s in students if s.id == student_id), None)
            if current is None or not current.is_archived:
                raise ValidationError("Archived student not found")

            restored = replace(current, status=StudentStatus.ACTIVE, semester=TERMINAL_SEMESTER)
            self._store.save_students([restored if s.id == student_id else s for s in students])

        self._audit.log_activity(actor.name, f"Restored student ID: {student_id} from Recycle Bin")
        return restored

    def delete_permanently(self, actor: Actor, student_id: str) -> None:
        ensure_role(actor, PROMOTION_ROLES, "Only the super admin or principal can delete archived students")

        with self._lock:
            students = self._store.get_students()
            current = next((s for s in students if s.id == student_id), None)
            if current is None or not current.is_archived:
                raise ValidationError("Archived student not found")

            self._store.save_batch(
                students=[s for s in students if s.id != student_id],
                promotion_logs=_scrub_snapshots(self._store.get_promotion_logs(), {student_id}),
            )

        self._audit.log_activity(actor.name, f"Permanently deleted archived student ID: {student_id}")

    def clear_all(self, actor: Actor) -> int:
        """Permanently delete every archived student. Returns how many were removed."""

        ensure_role(actor, PROMOTION_ROLES, "Only the super admin or principal can clear the recycle bin")

        with self._lock:
            students = self._store.get_students()
            removed = {s.id for s in students if s.is_archived}
            if removed:
                self._store.save_batch(
                    students=[s for s in students if s.id not in removed],
                    promotion_logs=_scrub_snapshots(self._store.get_promotion_logs(), removed),
                )

        self._audit.log_activity(actor.name, "Cleared Recycle Bin")
        return len(removed)
