from __future__ import annotations

from datetime import date

import pytest

from conftest import InMemoryDirectoryStore
from src.kpt_attendance.kpt_attendance.access.actor import FacultyActor, HodActor, PrincipalActor, SuperAdminActor
from src.kpt_attendance.kpt_attendance.attendance.model import AttendanceRecord
from src.kpt_attendance.kpt_attendance.core.enums import Branch, Eligibility, MarkStatus, StudentStatus
from src.kpt_attendance.kpt_attendance.core.exceptions import AuthorizationError
from src.kpt_attendance.kpt_attendance.reports.service import (
    ReportService,
    attendance_percentage,
    eligibility,
    is_shortage,
)
from src.kpt_attendance.kpt_attendance.students.model import Student

DAY = date(2025, 1, 6)


def _student(sid: str, name: str, branch: Branch = Branch.CS, **kw) -> Student:
    return Student(
        id=sid,
        name=name,
        roll_number=f"R{sid}",
        reg_number=f"REG{sid}",
        branch=branch,
        semester=kw.pop("semester", 2),
        **kw,
    )


def _marks(student_id: str, present: int, absent: int, branch: Branch = Branch.CS, day: date = DAY):
    out = []
    for i in range(present + absent):
        out.append(
            AttendanceRecord(
                id=f"{student_id}-{i}",
                student_id=student_id,
                date=day if i == 0 else date(2024, 12, 1 + i),
                status=MarkStatus.PRESENT if i < present else MarkStatus.ABSENT,
                subject="Maths",
                semester=2,
                branch=branch,
                marked_by="fac",
            )
        )
    return out


def test_percentage_is_zero_without_records():
    assert attendance_percentage(0, 0) == 0.0


def test_exactly_75_percent_is_shortage():
    assert is_shortage(75.0)
    assert eligibility(75.0) == Eligibility.SHORTAGE
    assert eligibility(75.01) == Eligibility.ELIGIBLE
    assert eligibility(attendance_percentage(3, 4)) == Eligibility.SHORTAGE


def test_build_report_rows():
    store = InMemoryDirectoryStore(
        students=[_student("1", "Aarav"), _student("2", "Bhavya"), _student("3", "Chirag")],
        attendance=_marks("1", 3, 1) + _marks("2", 4, 1),
    )

    report = ReportService(store).build_report(SuperAdminActor(id="a", name="A"), branch="CS", semester=2)

    rows = {r.name: r for r in report.rows}
    assert (rows["Aarav"].total_classes, rows["Aarav"].present, rows["Aarav"].status) == (4, 3, Eligibility.SHORTAGE)
    assert rows["Bhavya"].percentage == pytest.approx(80.0)
    assert rows["Bhavya"].status == Eligibility.ELIGIBLE
    assert (rows["Chirag"].total_classes, rows["Chirag"].percentage) == (0, 0.0)


def test_report_search_matches_name_or_roll_number():
    store = InMemoryDirectoryStore(students=[_student("1", "Aarav"), _student("2", "Bhavya")])
    svc = ReportService(store)
    admin = SuperAdminActor(id="a", name="A")

    assert [r.name for r in svc.build_report(admin, branch="CS", semester=2, search="bha").rows] == ["Bhavya"]
    assert [r.name for r in svc.build_report(admin, branch="CS", semester=2, search="r1").rows] == ["Aarav"]


def test_report_excludes_archived_students():
    store = InMemoryDirectoryStore(
        students=[_student("1", "Aarav"), _student("2", "Gone", status=StudentStatus.ARCHIVED)]
    )

    report = ReportService(store).build_report(PrincipalActor(id="p", name="P"), branch=Branch.CS, semester=2)

    assert [r.name for r in report.rows] == ["Aarav"]


def test_hod_cannot_report_on_foreign_branch():
    svc = ReportService(InMemoryDirectoryStore())

    with pytest.raises(AuthorizationError) as exc:
        svc.build_report(HodActor(id="h", name="H", department=Branch.EC), branch="CS", semester=2)

    assert exc.value.fallback_branch == "EC"


def test_faculty_has_no_reports():
    svc = ReportService(InMemoryDirectoryStore())

    with pytest.raises(AuthorizationError):
        svc.build_report(FacultyActor(id="f", name="F", department=Branch.CS), branch="CS", semester=2)


def test_dashboard_counts_defaulters_with_report_rule():
    store = InMemoryDirectoryStore(
        students=[
            _student("1", "Exactly75"),
            _student("2", "Eighty"),
            _student("3", "NoRecords"),
            _student("4", "EcLow", branch=Branch.EC),
        ],
        attendance=_marks("1", 3, 1) + _marks("2", 4, 1) + _marks("4", 0, 2, branch=Branch.EC),
    )
    svc = ReportService(store)

    admin = svc.dashboard_stats(SuperAdminActor(id="a", name="A"), day=DAY)
    assert admin.total_students == 4
    assert admin.defaulters == 2
    assert admin.branch_counts["CS"] == 3
    assert admin.branch_counts["EC"] == 1
    assert admin.present_today == 2
    assert admin.absent_today == 1

    hod = svc.dashboard_stats(HodActor(id="h", name="H", department=Branch.CS), day=DAY)
    assert hod.total_students == 3
    assert hod.defaulters == 1
    assert hod.absent_today == 0
