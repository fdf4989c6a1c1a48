from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional

from ..access.actor import Actor
from ..access.policy import can_access, ensure_branch_access, ensure_role
from ..common.datetime_utils import is_non_operating_day, now_local
from ..common.ids import new_id
from ..common.validators import require_branch, require_semester
from ..core.constants import RECENT_RECORDS_LIMIT
from ..core.enums import Branch, MarkStatus, Role, RosterSort
from ..core.exceptions import AuthorizationError, ValidationError
from ..store.repository import AuditSink, DirectoryStore
from ..students.model import Student
from .model import AttendanceRecord, AttendanceSession

logger = logging.getLogger(__name__)

MARKING_ROLES = frozenset({Role.SUPER_ADMIN, Role.HOD, Role.FACULTY})


def sort_roster(students: list[Student], sort: RosterSort | str = RosterSort.NAME) -> list[Student]:
    """Stable, deterministic roster order by name or by registration number."""

    if RosterSort(sort) == RosterSort.REGISTRATION:
        return sorted(students, key=lambda s: (s.reg_number, s.name, s.id))
    return sorted(students, key=lambda s: (s.name.lower(), s.reg_number, s.id))


def can_edit_record(actor: Actor, record: AttendanceRecord) -> bool:
    if actor.role == Role.SUPER_ADMIN:
        return True
    if actor.role == Role.HOD:
        return record.branch == actor.department
    if actor.role == Role.FACULTY:
        return record.marked_by == actor.id
    return False


class AttendanceService:
    """Use cases: daily attendance sessions (start, save, edit, recent)."""

    def __init__(self, store: DirectoryStore, audit: AuditSink):
        self._store = store
        self._audit = audit

    def _ensure_operating_day(self, day: date) -> None:
        if is_non_operating_day(day):
            raise ValidationError("Cannot mark attendance on Sunday.")

    def _ensure_can_mark(self, actor: Actor, branch: Branch) -> None:
        ensure_branch_access(actor, branch)
        ensure_role(actor, MARKING_ROLES, "Principal accounts cannot mark attendance")

    def _roster(self, branch: Branch, semester: int, sort: RosterSort | str) -> list[Student]:
        students = [
            s for s in self._store.get_students() if s.branch == branch and s.semester == semester and not s.is_archived
        ]
        return sort_roster(students, sort)

    def assignments_for(self, actor: Actor):
        if actor.role != Role.FACULTY:
            return []
        return [a for a in self._store.get_assignments() if a.faculty_id == actor.id]

    def start_session(
        self,
        actor: Actor,
        *,
        branch: Branch | str,
        semester: int | str,
        subject: str,
        sort: RosterSort | str = RosterSort.NAME,
        now: datetime | None = None,
    ) -> AttendanceSession:
        now = now or now_local()
        branch = require_branch(branch)
        semester = require_semester(semester)
        subject = (subject or "").strip()

        self._ensure_can_mark(actor, branch)
        if not subject:
            raise ValidationError("Subject is required")
        self._ensure_operating_day(now.date())

        if actor.role == Role.FACULTY and not any(
            a.branch == branch and a.semester == semester and a.subject == subject for a in self.assignments_for(actor)
        ):
            raise AuthorizationError("No class assignment for this branch, semester and subject")

        return AttendanceSession(
            branch=branch,
            semester=semester,
            subject=subject,
            date=now.date(),
            roster=self._roster(branch, semester, sort),
        )

    def save_session(self, actor: Actor, session: AttendanceSession, *, now: datetime | None = None) -> list[AttendanceRecord]:
        """Persist one record per roster student, replacing the session's prior records.

        Unmarked students are saved as absent.
        """

        now = now or now_local()
        self._ensure_can_mark(actor, session.branch)
        if not session.subject:
            raise ValidationError("Subject is required")
        self._ensure_operating_day(now.date())

        records = [
            AttendanceRecord(
                id=new_id(),
                student_id=s.id,
                date=session.date,
                status=session.marks.get(s.id, MarkStatus.ABSENT),
                subject=session.subject,
                semester=session.semester,
                branch=session.branch,
                marked_by=session.marked_by.get(s.id, actor.id),
            )
            for s in session.roster
        ]

        kept = [r for r in self._store.get_attendance() if r.session_key != session.session_key]
        self._store.save_attendance([*kept, *records])
        self._audit.log_activity(actor.name, f"Saved attendance: {session.subject} ({session.branch.value})")
        logger.info("Attendance saved for %s: %d record(s)", session.session_key, len(records))
        return records

    def edit_session(
        self,
        actor: Actor,
        record_id: str,
        *,
        sort: RosterSort | str = RosterSort.NAME,
    ) -> AttendanceSession:
        """Re-open the session a stored record belongs to, pre-filled with its marks."""

        all_records = self._store.get_attendance()
        record: Optional[AttendanceRecord] = next((r for r in all_records if r.id == record_id), None)
        if record is None:
            raise ValidationError("Attendance record not found")
        if not can_edit_record(actor, record):
            raise AuthorizationError("You can only edit attendance you are responsible for")

        # The roster is whoever was marked in this session, even if they have
        # since been promoted or archived.
        session_records = [r for r in all_records if r.session_key == record.session_key]
        marked_ids = {r.student_id for r in session_records}
        roster = [s for s in self._store.get_students() if s.id in marked_ids]

        session = AttendanceSession(
            branch=record.branch,
            semester=record.semester,
            subject=record.subject,
            date=record.date,
            roster=sort_roster(roster, sort),
        )
        for r in session_records:
            session.marks[r.student_id] = r.status
            session.marked_by[r.student_id] = r.marked_by
        return session

    def recent_records(self, actor: Actor, *, day: date | None = None) -> list[AttendanceRecord]:
        """Newest records of the day the actor may see: faculty their own, others their scope."""

        day = day or now_local().date()
        records = self._store.get_attendance()
        if actor.role == Role.FACULTY:
            visible = [r for r in records if r.marked_by == actor.id]
        else:
            visible = [r for r in records if can_access(actor.role, actor.department, r.branch)]

        todays = [r for r in visible if r.date == day]
        return list(reversed(todays[-RECENT_RECORDS_LIMIT:]))
