from __future__ import annotations

import logging
from typing import Optional

from ..access.actor import Actor
from ..access.policy import can_access, ensure_branch_access, ensure_role
from ..common.ids import new_id
from ..common.validators import require_branch, require_non_empty, require_semester
from ..core.enums import Branch, Role
from ..core.exceptions import ValidationError
from ..store.repository import AuditSink, DirectoryStore
from ..users.model import User
from .model import Faculty, FacultyAssignment

logger = logging.getLogger(__name__)

_MANAGER_ROLES = frozenset({Role.SUPER_ADMIN, Role.HOD})


class FacultyService:
    """Use cases: faculty directory and class assignments."""

    def __init__(self, store: DirectoryStore, audit: AuditSink, *, default_password: str = "password123"):
        self._store = store
        self._audit = audit
        self._default_password = default_password

    def list_visible(self, actor: Actor, *, search: str = "") -> list[Faculty]:
        needle = (search or "").strip().lower()
        return [
            f
            for f in self._store.get_faculty()
            if can_access(actor.role, actor.department, f.department)
            and (not needle or needle in f.name.lower() or needle in f.employee_id.lower())
        ]

    def list_subjects(self) -> list[str]:
        return self._store.get_subjects()

    def assignments_for(self, faculty_id: str) -> list[FacultyAssignment]:
        return [a for a in self._store.get_assignments() if a.faculty_id == faculty_id]

    def add_faculty(self, actor: Actor, *, name: str, employee_id: str, department: Branch | str) -> Faculty:
        ensure_role(actor, _MANAGER_ROLES, "Only administrators and HODs can add faculty")
        name = require_non_empty(name, "Name")
        employee_id = require_non_empty(employee_id, "Employee ID")
        department = require_branch(department)
        ensure_branch_access(actor, department)

        faculty = self._store.get_faculty()
        users = self._store.get_users()
        if any(f.employee_id == employee_id for f in faculty):
            raise ValidationError("Employee ID already exists")
        if any(u.username.strip().lower() == employee_id.lower() for u in users):
            raise ValidationError("A login with this employee ID already exists")

        # Faculty profile and login account share one id.
        fac_id = new_id()
        new_fac = Faculty(id=fac_id, name=name, department=department, employee_id=employee_id)
        new_user = User(
            id=fac_id,
            username=employee_id,
            password=self._default_password,
            role=Role.FACULTY,
            name=name,
            department=department,
            employee_id=employee_id,
        )

        self._store.save_batch(faculty=[*faculty, new_fac], users=[*users, new_user])
        self._audit.log_activity(actor.name, f"Added new faculty: {name} ({employee_id})")
        return new_fac

    def delete_faculty(self, actor: Actor, faculty_id: str) -> None:
        """Remove a faculty profile with its login account and class assignments."""

        ensure_role(actor, {Role.SUPER_ADMIN}, "Only the super admin can delete faculty")

        faculty = self._store.get_faculty()
        if not any(f.id == faculty_id for f in faculty):
            raise ValidationError("Faculty not found")

        self._store.save_batch(
            faculty=[f for f in faculty if f.id != faculty_id],
            users=[u for u in self._store.get_users() if u.id != faculty_id],
            assignments=[a for a in self._store.get_assignments() if a.faculty_id != faculty_id],
        )
        self._audit.log_activity(actor.name, f"Deleted faculty ID: {faculty_id}")
        logger.info("Faculty %s deleted by %s", faculty_id, actor.name)

    def assign_class(
        self,
        actor: Actor,
        faculty_id: str,
        *,
        branch: Branch | str,
        semester: int | str,
        subject: str,
    ) -> FacultyAssignment:
        ensure_role(actor, _MANAGER_ROLES, "Only administrators and HODs can assign classes")
        subject = (subject or "").strip()
        if not subject:
            raise ValidationError("Select a subject")
        branch = require_branch(branch)
        semester = require_semester(semester)
        ensure_branch_access(actor, branch)

        if not any(f.id == faculty_id for f in self._store.get_faculty()):
            raise ValidationError("Faculty not found")

        assignment = FacultyAssignment(
            id=new_id(),
            faculty_id=faculty_id,
            branch=branch,
            semester=semester,
            subject=subject,
        )
        self._store.save_assignments([*self._store.get_assignments(), assignment])
        self._audit.log_activity(actor.name, f"Assigned {subject} ({branch.name} SEM {semester}) to faculty {faculty_id}")
        return assignment

    def remove_assignment(self, actor: Actor, assignment_id: str) -> None:
        ensure_role(actor, _MANAGER_ROLES, "Only administrators and HODs can remove assignments")

        assignments = self._store.get_assignments()
        target: Optional[FacultyAssignment] = next((a for a in assignments if a.id == assignment_id), None)
        if target is None:
            raise ValidationError("Assignment not found")
        ensure_branch_access(actor, target.branch)

        self._store.save_assignments([a for a in assignments if a.id != assignment_id])
        self._audit.log_activity(actor.name, f"Removed class assignment: {target.subject} ({target.branch.name})")
