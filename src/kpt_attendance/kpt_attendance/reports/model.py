from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import Branch, Eligibility


@dataclass(frozen=True)
class ReportRow:
    student_id: str
    roll_number: str
    reg_number: str
    name: str
    total_classes: int
    present: int
    percentage: float
    status: Eligibility


@dataclass(frozen=True)
class AttendanceReport:
    branch: Branch
    semester: int
    rows: list[ReportRow]


@dataclass(frozen=True)
class DashboardStats:
    total_students: int
    present_today: int
    absent_today: int
    defaulters: int
    branch_counts: dict[str, int]
