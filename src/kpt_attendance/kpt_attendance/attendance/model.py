from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from ..core.enums import Branch, MarkStatus
from ..students.model import Student


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one student's mark for one session."""

    id: str
    student_id: str
    date: date
    status: MarkStatus
    subject: str
    semester: int
    branch: Branch
    marked_by: str

    @property
    def session_key(self) -> tuple[date, str, Branch, int]:
        return (self.date, self.subject, self.branch, self.semester)


@dataclass
class AttendanceSession:
    """A marking session identified by (date, subject, branch, semester).

    Marks are pending until the session is saved; unmarked students are
    saved as absent. `marked_by` holds the original marker of each
    student when an existing session is re-opened.
    """

    branch: Branch
    semester: int
    subject: str
    date: date
    roster: list[Student]
    marks: dict[str, MarkStatus] = field(default_factory=dict)
    marked_by: dict[str, str] = field(default_factory=dict)

    @property
    def session_key(self) -> tuple[date, str, Branch, int]:
        return (self.date, self.subject, self.branch, self.semester)

    def mark(self, student_id: str, status: MarkStatus) -> None:
        if not any(s.id == student_id for s in self.roster):
            raise KeyError(student_id)
        self.marks[student_id] = MarkStatus(status)

    def status_for(self, student_id: str) -> Optional[MarkStatus]:
        return self.marks.get(student_id)

    def counts(self) -> dict[str, int]:
        values = list(self.marks.values())
        return {
            "present": sum(1 for v in values if v == MarkStatus.PRESENT),
            "absent": sum(1 for v in values if v == MarkStatus.ABSENT),
            "total": len(self.roster),
        }
