from __future__ import annotations

from dataclasses import dataclass, field

from ..core.enums import Branch


@dataclass(frozen=True)
class Faculty:
    id: str
    name: str
    department: Branch
    employee_id: str
    subjects: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class FacultyAssignment:
    """Teaching-load grant: faculty teaches `subject` to (branch, semester)."""

    id: str
    faculty_id: str
    branch: Branch
    semester: int
    subject: str
