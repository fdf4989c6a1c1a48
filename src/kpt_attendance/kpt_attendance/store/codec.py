"""JSON-compatible conversion of directory entities.

Field names follow the stored documents (camelCase keys), so collections
written by earlier deployments of the portal load unchanged.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Callable, Dict

from ..attendance.model import AttendanceRecord
from ..core.enums import Branch, CycleType, MarkStatus, Role, StudentStatus
from ..faculty.model import Faculty, FacultyAssignment
from ..promotion.model import PromotionLog
from ..students.model import Student
from ..users.model import User


def user_to_dict(u: User) -> Dict[str, Any]:
    out: Dict[str, Any] = {
        "id": u.id,
        "username": u.username,
        "password": u.password,
        "role": u.role.value,
        "name": u.name,
    }
    if u.department is not None:
        out["department"] = u.department.value
    if u.employee_id:
        out["employeeId"] = u.employee_id
    return out


def user_from_dict(d: Dict[str, Any]) -> User:
    return User(
        id=str(d["id"]),
        username=d["username"],
        password=d.get("password") or "",
        role=Role(d["role"]),
        name=d.get("name") or d["username"],
        department=Branch(d["department"]) if d.get("department") else None,
        employee_id=d.get("employeeId"),
    )


def student_to_dict(s: Student) -> Dict[str, Any]:
    return {
        "id": s.id,
        "name": s.name,
        "age": s.age,
        "rollNumber": s.roll_number,
        "regNumber": s.reg_number,
        "branch": s.branch.value,
        "semester": s.semester,
        "section": s.section,
        "status": s.status.value,
    }


def student_from_dict(d: Dict[str, Any]) -> Student:
    return Student(
        id=str(d["id"]),
        name=d["name"],
        roll_number=d.get("rollNumber") or "",
        reg_number=d["regNumber"],
        branch=Branch(d["branch"]),
        semester=int(d["semester"]),
        section=d.get("section") or "A",
        age=int(d.get("age") or 18),
        # Documents written before archival existed carry no status.
        status=StudentStatus(d.get("status") or StudentStatus.ACTIVE.value),
    )


def faculty_to_dict(f: Faculty) -> Dict[str, Any]:
    return {
        "id": f.id,
        "name": f.name,
        "department": f.department.value,
        "employeeId": f.employee_id,
        "subjects": list(f.subjects),
    }


def faculty_from_dict(d: Dict[str, Any]) -> Faculty:
    return Faculty(
        id=str(d["id"]),
        name=d["name"],
        department=Branch(d["department"]),
        employee_id=d["employeeId"],
        subjects=tuple(d.get("subjects") or ()),
    )


def assignment_to_dict(a: FacultyAssignment) -> Dict[str, Any]:
    return {
        "id": a.id,
        "facultyId": a.faculty_id,
        "branch": a.branch.value,
        "semester": a.semester,
        "subject": a.subject,
    }


def assignment_from_dict(d: Dict[str, Any]) -> FacultyAssignment:
    return FacultyAssignment(
        id=str(d["id"]),
        faculty_id=str(d["facultyId"]),
        branch=Branch(d["branch"]),
        semester=int(d["semester"]),
        subject=d["subject"],
    )


def attendance_to_dict(r: AttendanceRecord) -> Dict[str, Any]:
    return {
        "id": r.id,
        "studentId": r.student_id,
        "date": r.date.isoformat(),
        "status": r.status.value,
        "subject": r.subject,
        "semester": r.semester,
        "branch": r.branch.value,
        "markedBy": r.marked_by,
    }


def attendance_from_dict(d: Dict[str, Any]) -> AttendanceRecord:
    return AttendanceRecord(
        id=str(d["id"]),
        student_id=str(d["studentId"]),
        date=date.fromisoformat(str(d["date"])[:10]),
        status=MarkStatus(d["status"]),
        subject=d["subject"],
        semester=int(d["semester"]),
        branch=Branch(d["branch"]),
        marked_by=str(d.get("markedBy") or ""),
    )


def promotion_log_to_dict(log: PromotionLog) -> Dict[str, Any]:
    return {
        "id": log.id,
        "date": log.date.isoformat(),
        "performedBy": log.performed_by,
        "type": log.type.value,
        "studentCount": log.student_count,
        "advancedCount": log.advanced_count,
        "archivedCount": log.archived_count,
        "previousStates": [student_to_dict(s) for s in log.previous_states],
    }


def promotion_log_from_dict(d: Dict[str, Any]) -> PromotionLog:
    raw_date = str(d["date"]).replace("Z", "+00:00")
    return PromotionLog(
        id=str(d["id"]),
        date=datetime.fromisoformat(raw_date),
        performed_by=d.get("performedBy") or "",
        type=CycleType(d["type"]),
        student_count=int(d.get("studentCount") or 0),
        previous_states=tuple(student_from_dict(s) for s in d.get("previousStates") or ()),
        advanced_count=int(d.get("advancedCount") or 0),
        archived_count=int(d.get("archivedCount") or 0),
    )


def _identity(value: Any) -> Any:
    return value


ENCODERS: Dict[str, Callable[[Any], Any]] = {
    "users": user_to_dict,
    "students": student_to_dict,
    "faculty": faculty_to_dict,
    "attendance": attendance_to_dict,
    "assignments": assignment_to_dict,
    "promotion_logs": promotion_log_to_dict,
    "subjects": str,
}

DECODERS: Dict[str, Callable[[Any], Any]] = {
    "users": user_from_dict,
    "students": student_from_dict,
    "faculty": faculty_from_dict,
    "attendance": attendance_from_dict,
    "assignments": assignment_from_dict,
    "promotion_logs": promotion_log_from_dict,
    "subjects": _identity,
}

COLLECTIONS = tuple(ENCODERS)
