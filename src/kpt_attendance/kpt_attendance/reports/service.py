from __future__ import annotations

from datetime import date
from typing import Iterable

from ..access.actor import Actor
from ..access.policy import can_access, ensure_branch_access, ensure_role
from ..common.datetime_utils import now_local
from ..common.validators import require_branch, require_semester
from ..core.constants import ELIGIBILITY_THRESHOLD
from ..core.enums import Branch, Eligibility, MarkStatus, Role
from ..store.repository import DirectoryStore
from .model import AttendanceReport, DashboardStats, ReportRow

REPORT_ROLES = frozenset({Role.SUPER_ADMIN, Role.PRINCIPAL, Role.HOD})


def attendance_percentage(present: int, total: int) -> float:
    """0 when no classes were recorded."""

    if total == 0:
        return 0.0
    return present / total * 100


def is_shortage(percentage: float) -> bool:
    # Inclusive: exactly 75% is a shortage.
    return percentage <= ELIGIBILITY_THRESHOLD


def eligibility(percentage: float) -> Eligibility:
    return Eligibility.SHORTAGE if is_shortage(percentage) else Eligibility.ELIGIBLE


def _tally(records: Iterable) -> dict[str, tuple[int, int]]:
    """student_id -> (present, total)"""

    out: dict[str, tuple[int, int]] = {}
    for r in records:
        present, total = out.get(r.student_id, (0, 0))
        out[r.student_id] = (present + (1 if r.status == MarkStatus.PRESENT else 0), total + 1)
    return out


class ReportService:
    """Read-only aggregation over students and attendance records."""

    def __init__(self, store: DirectoryStore):
        self._store = store

    def build_report(
        self,
        actor: Actor,
        *,
        branch: Branch | str,
        semester: int | str,
        search: str = "",
    ) -> AttendanceReport:
        ensure_role(actor, REPORT_ROLES, "Reports are not available for your role")
        branch = require_branch(branch)
        semester = require_semester(semester)
        ensure_branch_access(actor, branch)

        students = [
            s
            for s in self._store.get_students()
            if s.branch == branch and s.semester == semester and not s.is_archived
        ]
        tally = _tally(r for r in self._store.get_attendance() if r.branch == branch and r.semester == semester)

        needle = (search or "").strip().lower()
        rows: list[ReportRow] = []
        for s in students:
            if needle and needle not in s.name.lower() and needle not in s.roll_number.lower():
                continue
            present, total = tally.get(s.id, (0, 0))
            pct = attendance_percentage(present, total)
            rows.append(
                ReportRow(
                    student_id=s.id,
                    roll_number=s.roll_number,
                    reg_number=s.reg_number,
                    name=s.name,
                    total_classes=total,
                    present=present,
                    percentage=pct,
                    status=eligibility(pct),
                )
            )
        return AttendanceReport(branch=branch, semester=semester, rows=rows)

    def dashboard_stats(self, actor: Actor, *, day: date | None = None) -> DashboardStats:
        """Scoped headline numbers.

        A defaulter is a visible student with at least one record whose
        percentage is a shortage under the same rule the report uses.
        """

        day = day or now_local().date()
        students = self._store.get_students()
        visible = [
            s for s in students if not s.is_archived and can_access(actor.role, actor.department, s.branch)
        ]
        visible_ids = {s.id for s in visible}

        records = [r for r in self._store.get_attendance() if can_access(actor.role, actor.department, r.branch)]
        todays = [r for r in records if r.date == day]

        tally = _tally(r for r in records if r.student_id in visible_ids)
        defaulters = sum(1 for present, total in tally.values() if total and is_shortage(attendance_percentage(present, total)))

        branch_counts = {b.name: 0 for b in Branch}
        for s in students:
            if not s.is_archived:
                branch_counts[s.branch.name] += 1

        return DashboardStats(
            total_students=len(visible),
            present_today=sum(1 for r in todays if r.status == MarkStatus.PRESENT),
            absent_today=sum(1 for r in todays if r.status == MarkStatus.ABSENT),
            defaulters=defaulters,
            branch_counts=branch_counts,
        )
