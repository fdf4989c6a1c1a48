from __future__ import annotations

from datetime import date, datetime

import pytest

from conftest import InMemoryAudit, InMemoryDirectoryStore
from src.kpt_attendance.kpt_attendance.access.actor import FacultyActor, HodActor, PrincipalActor, SuperAdminActor
from src.kpt_attendance.kpt_attendance.attendance.model import AttendanceRecord
from src.kpt_attendance.kpt_attendance.attendance.service import AttendanceService, can_edit_record, sort_roster
from src.kpt_attendance.kpt_attendance.core.enums import Branch, CycleType, MarkStatus, RosterSort, StudentStatus
from src.kpt_attendance.kpt_attendance.core.exceptions import AuthorizationError, ValidationError
from src.kpt_attendance.kpt_attendance.faculty.model import FacultyAssignment
from src.kpt_attendance.kpt_attendance.promotion.service import PromotionService
from src.kpt_attendance.kpt_attendance.students.model import Student

ADMIN = SuperAdminActor(id="u-admin", name="Super Admin")
HOD_CS = HodActor(id="hod-cs", name="Prof. Rajeshwari", department=Branch.CS)
FAC_CS = FacultyActor(id="fac-cs-1", name="Suresh Kumar", department=Branch.CS)
SUNDAY = datetime(2025, 1, 5, 10, 0)


def _students():
    return [
        Student(id="s1", name="Zara", roll_number="CS03", reg_number="103CS23003", branch=Branch.CS, semester=3),
        Student(id="s2", name="Aarav", roll_number="CS02", reg_number="103CS23002", branch=Branch.CS, semester=3),
        Student(id="s3", name="Meera", roll_number="CS01", reg_number="103CS23001", branch=Branch.CS, semester=3),
        Student(
            id="s4",
            name="Old",
            roll_number="CS09",
            reg_number="103CS20009",
            branch=Branch.CS,
            semester=3,
            status=StudentStatus.ARCHIVED,
        ),
        Student(id="e1", name="Eshan", roll_number="EC01", reg_number="103EC23001", branch=Branch.EC, semester=3),
    ]


def _service(**extra):
    store = InMemoryDirectoryStore(students=_students(), **extra)
    audit = InMemoryAudit()
    return AttendanceService(store, audit), store, audit


def test_roster_excludes_archived_and_sorts_by_name(fixed_now):
    svc, _, _ = _service()

    session = svc.start_session(ADMIN, branch="CS", semester=3, subject="Maths", now=fixed_now)

    assert [s.name for s in session.roster] == ["Aarav", "Meera", "Zara"]
    assert session.date == fixed_now.date()


def test_sort_by_registration_number():
    ordered = sort_roster(_students()[:3], RosterSort.REGISTRATION)

    assert [s.reg_number for s in ordered] == ["103CS23001", "103CS23002", "103CS23003"]


def test_saving_twice_replaces_instead_of_appending(fixed_now):
    svc, store, _ = _service()

    first = svc.start_session(ADMIN, branch=Branch.CS, semester=3, subject="Maths", now=fixed_now)
    first.mark("s1", MarkStatus.PRESENT)
    svc.save_session(ADMIN, first, now=fixed_now)

    second = svc.start_session(ADMIN, branch=Branch.CS, semester=3, subject="Maths", now=fixed_now)
    second.mark("s1", MarkStatus.ABSENT)
    second.mark("s2", MarkStatus.PRESENT)
    svc.save_session(ADMIN, second, now=fixed_now)

    records = store.get_attendance()
    assert len(records) == 3
    by_student = {r.student_id: r.status for r in records}
    assert by_student == {"s1": MarkStatus.ABSENT, "s2": MarkStatus.PRESENT, "s3": MarkStatus.ABSENT}


def test_other_sessions_survive_a_save(fixed_now):
    svc, store, _ = _service()

    maths = svc.start_session(ADMIN, branch=Branch.CS, semester=3, subject="Maths", now=fixed_now)
    svc.save_session(ADMIN, maths, now=fixed_now)
    physics = svc.start_session(ADMIN, branch=Branch.CS, semester=3, subject="Physics", now=fixed_now)
    svc.save_session(ADMIN, physics, now=fixed_now)

    assert len(store.get_attendance()) == 6


def test_unmarked_students_are_saved_absent(fixed_now):
    svc, _, audit = _service()
    session = svc.start_session(HOD_CS, branch=Branch.CS, semester=3, subject="Maths", now=fixed_now)

    records = svc.save_session(HOD_CS, session, now=fixed_now)

    assert {r.status for r in records} == {MarkStatus.ABSENT}
    assert all(r.marked_by == "hod-cs" for r in records)
    assert audit.actions[0] == f"Saved attendance: Maths ({Branch.CS.value})"


def test_cannot_start_or_save_on_sunday(fixed_now):
    svc, store, _ = _service()

    with pytest.raises(ValidationError):
        svc.start_session(ADMIN, branch=Branch.CS, semester=3, subject="Maths", now=SUNDAY)

    session = svc.start_session(ADMIN, branch=Branch.CS, semester=3, subject="Maths", now=fixed_now)
    with pytest.raises(ValidationError):
        svc.save_session(ADMIN, session, now=SUNDAY)
    assert store.get_attendance() == []


def test_subject_is_required(fixed_now):
    svc, _, _ = _service()

    with pytest.raises(ValidationError):
        svc.start_session(ADMIN, branch=Branch.CS, semester=3, subject="  ", now=fixed_now)


def test_hod_cannot_open_foreign_branch(fixed_now):
    svc, _, _ = _service()

    with pytest.raises(AuthorizationError) as exc:
        svc.start_session(HOD_CS, branch=Branch.EC, semester=3, subject="Maths", now=fixed_now)

    assert exc.value.fallback_branch == "CS"


def test_principal_cannot_mark(fixed_now):
    svc, _, _ = _service()

    with pytest.raises(AuthorizationError):
        svc.start_session(PrincipalActor(id="p", name="P"), branch=Branch.CS, semester=3, subject="Maths", now=fixed_now)


def test_faculty_needs_matching_assignment(fixed_now):
    asgn = FacultyAssignment(id="a1", faculty_id="fac-cs-1", branch=Branch.CS, semester=3, subject="Maths")
    svc, _, _ = _service(assignments=[asgn])

    session = svc.start_session(FAC_CS, branch=Branch.CS, semester=3, subject="Maths", now=fixed_now)
    assert len(session.roster) == 3

    with pytest.raises(AuthorizationError):
        svc.start_session(FAC_CS, branch=Branch.CS, semester=3, subject="Physics", now=fixed_now)


def _record(**kw) -> AttendanceRecord:
    base = dict(
        id="r1",
        student_id="s1",
        date=date(2025, 1, 6),
        status=MarkStatus.PRESENT,
        subject="Maths",
        semester=3,
        branch=Branch.CS,
        marked_by="fac-cs-1",
    )
    base.update(kw)
    return AttendanceRecord(**base)


def test_edit_permissions():
    rec = _record()

    assert can_edit_record(ADMIN, rec)
    assert can_edit_record(HOD_CS, rec)
    assert can_edit_record(FAC_CS, rec)
    assert not can_edit_record(FacultyActor(id="fac-cs-2", name="Priya", department=Branch.CS), rec)
    assert not can_edit_record(HodActor(id="hod-ec", name="M", department=Branch.EC), rec)
    assert not can_edit_record(PrincipalActor(id="p", name="P"), rec)


def test_edit_reopens_session_with_prior_marks_and_keeps_its_date(fixed_now):
    old_day = date(2025, 1, 3)
    records = [
        _record(id="r1", student_id="s1", date=old_day, status=MarkStatus.PRESENT),
        _record(id="r2", student_id="s2", date=old_day, status=MarkStatus.ABSENT),
    ]
    svc, store, _ = _service(attendance=records)

    session = svc.edit_session(HOD_CS, "r1")
    assert session.date == old_day
    assert session.status_for("s1") == MarkStatus.PRESENT
    assert session.status_for("s2") == MarkStatus.ABSENT

    session.mark("s2", MarkStatus.PRESENT)
    svc.save_session(HOD_CS, session, now=fixed_now)

    saved = store.get_attendance()
    assert len(saved) == 2
    assert {r.date for r in saved} == {old_day}
    assert {r.student_id: r.status for r in saved} == {"s1": MarkStatus.PRESENT, "s2": MarkStatus.PRESENT}


def test_edit_by_hod_keeps_original_marker(fixed_now):
    svc, store, _ = _service(attendance=[_record(id="r1", student_id="s1", marked_by="fac-cs-1")])

    session = svc.edit_session(HOD_CS, "r1")
    session.mark("s1", MarkStatus.ABSENT)
    svc.save_session(HOD_CS, session, now=fixed_now)

    (saved,) = store.get_attendance()
    assert saved.marked_by == "fac-cs-1"
    assert svc.edit_session(FAC_CS, saved.id).status_for("s1") == MarkStatus.ABSENT


def test_edit_after_promotion_keeps_the_original_class(fixed_now):
    svc, store, audit = _service()
    session = svc.start_session(ADMIN, branch=Branch.CS, semester=3, subject="Maths", now=fixed_now)
    session.mark("s1", MarkStatus.PRESENT)
    svc.save_session(ADMIN, session, now=fixed_now)
    PromotionService(store, audit).promote(ADMIN, CycleType.EVEN, now=fixed_now)
    newcomer = Student(
        id="n1", name="Newcomer", roll_number="CS07", reg_number="103CS24007", branch=Branch.CS, semester=3
    )
    store.save_students([*store.get_students(), newcomer])

    record_id = next(r.id for r in store.get_attendance() if r.student_id == "s1")
    reopened = svc.edit_session(ADMIN, record_id)
    assert {s.id for s in reopened.roster} == {"s1", "s2", "s3"}
    assert all(s.semester == 4 for s in reopened.roster)

    reopened.mark("s2", MarkStatus.PRESENT)
    svc.save_session(ADMIN, reopened, now=fixed_now)

    saved = {r.student_id: (r.status, r.semester) for r in store.get_attendance()}
    assert saved == {
        "s1": (MarkStatus.PRESENT, 3),
        "s2": (MarkStatus.PRESENT, 3),
        "s3": (MarkStatus.ABSENT, 3),
    }


def test_faculty_cannot_edit_someone_elses_session():
    svc, _, _ = _service(attendance=[_record(marked_by="hod-cs")])

    with pytest.raises(AuthorizationError):
        svc.edit_session(FAC_CS, "r1")


def test_recent_records_scoping():
    day = date(2025, 1, 6)
    records = [_record(id=f"m{i}", marked_by="fac-cs-1", date=day) for i in range(4)]
    records += [_record(id=f"o{i}", marked_by="hod-cs", date=day) for i in range(3)]
    records.append(_record(id="ec", branch=Branch.EC, marked_by="fac-ec-1", date=day))
    records.append(_record(id="old", marked_by="fac-cs-1", date=date(2025, 1, 3)))
    svc, _, _ = _service(attendance=records)

    mine = svc.recent_records(FAC_CS, day=day)
    assert [r.id for r in mine] == ["m3", "m2", "m1", "m0"]

    branch = svc.recent_records(HOD_CS, day=day)
    assert [r.id for r in branch] == ["o2", "o1", "o0", "m3", "m2"]

    everything = svc.recent_records(ADMIN, day=day)
    assert everything[0].id == "ec"


def test_marking_student_outside_roster_fails(fixed_now):
    svc, _, _ = _service()
    session = svc.start_session(ADMIN, branch=Branch.CS, semester=3, subject="Maths", now=fixed_now)

    with pytest.raises(KeyError):
        session.mark("e1", MarkStatus.PRESENT)
