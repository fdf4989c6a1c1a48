from __future__ import annotations

import logging
from dataclasses import replace
from typing import Optional, Sequence

from ..access.actor import Actor, is_department_scoped
from ..access.policy import can_access, ensure_branch_access, ensure_role
from ..common.ids import new_id
from ..common.validators import require_branch, require_non_empty, require_semester
from ..core.constants import DEFAULT_SECTION, ROLL_NUMBER_SUFFIX_LENGTH
from ..core.enums import Branch, Role, StudentStatus
from ..core.exceptions import BulkImportError, ValidationError
from ..store.repository import AuditSink, DirectoryStore
from .branch_normalizer import normalize_branch
from .model import ImportResult, Student

logger = logging.getLogger(__name__)

_IMPORT_ROLES = frozenset({Role.SUPER_ADMIN, Role.PRINCIPAL, Role.HOD})


def _matches(student: Student, needle: str) -> bool:
    if not needle:
        return True
    return (
        needle in student.name.lower()
        or needle in student.roll_number.lower()
        or needle in student.reg_number.lower()
    )


class StudentService:
    """Use cases: student directory (roster, enrolment, bulk import)."""

    def __init__(self, store: DirectoryStore, audit: AuditSink):
        self._store = store
        self._audit = audit

    def list_active(self, actor: Actor, *, search: str = "") -> list[Student]:
        """Active students visible to the actor, filtered by name, roll or register number."""

        needle = (search or "").strip().lower()
        return [
            s
            for s in self._store.get_students()
            if not s.is_archived and can_access(actor.role, actor.department, s.branch) and _matches(s, needle)
        ]

    def _find(self, students: Sequence[Student], student_id: str) -> Student:
        found = next((s for s in students if s.id == student_id), None)
        if not found:
            raise ValidationError("Student not found")
        return found

    def create(
        self,
        actor: Actor,
        *,
        name: str,
        reg_number: str,
        branch: Branch | str,
        semester: int | str = 1,
        section: str = DEFAULT_SECTION,
        roll_number: str = "",
    ) -> Student:
        name = require_non_empty(name, "Name")
        reg_number = require_non_empty(reg_number, "Register number")
        branch = require_branch(branch)
        semester = require_semester(semester)
        ensure_branch_access(actor, branch)

        students = self._store.get_students()
        if any(s.reg_number.lower() == reg_number.lower() for s in students):
            raise ValidationError(f"Register number {reg_number} already exists")

        student = Student(
            id=new_id(),
            name=name,
            roll_number=(roll_number or "").strip() or reg_number[-ROLL_NUMBER_SUFFIX_LENGTH:],
            reg_number=reg_number,
            branch=branch,
            semester=semester,
            section=(section or "").strip() or DEFAULT_SECTION,
            status=StudentStatus.ACTIVE,
        )
        self._store.save_students([*students, student])
        self._audit.log_activity(actor.name, f"Added student: {student.name}")
        return student

    def update(
        self,
        actor: Actor,
        student_id: str,
        *,
        name: Optional[str] = None,
        roll_number: Optional[str] = None,
        reg_number: Optional[str] = None,
        branch: Branch | str | None = None,
        semester: int | str | None = None,
        section: Optional[str] = None,
    ) -> Student:
        students = self._store.get_students()
        current = self._find(students, student_id)
        ensure_branch_access(actor, current.branch)

        if reg_number is not None and reg_number.strip() != current.reg_number:
            raise ValidationError("Register number cannot be changed")

        changes: dict = {}
        if name is not None:
            changes["name"] = require_non_empty(name, "Name")
        if roll_number is not None:
            changes["roll_number"] = require_non_empty(roll_number, "Roll number")
        if section is not None:
            changes["section"] = require_non_empty(section, "Section")
        if semester is not None:
            changes["semester"] = require_semester(semester)
        if branch is not None:
            new_branch = require_branch(branch)
            ensure_branch_access(actor, new_branch)
            changes["branch"] = new_branch

        updated = replace(current, **changes)
        self._store.save_students([updated if s.id == student_id else s for s in students])
        self._audit.log_activity(actor.name, f"Updated student: {updated.name}")
        return updated

    def delete(self, actor: Actor, student_id: str) -> None:
        students = self._store.get_students()
        current = self._find(students, student_id)
        ensure_branch_access(actor, current.branch)

        self._store.save_students([s for s in students if s.id != student_id])
        self._audit.log_activity(actor.name, f"Deleted student: {current.name}")

    def bulk_import(self, actor: Actor, text: str) -> ImportResult:
        """Import `Name, RegisterNumber, Branch` lines.

        Every line is validated first; any error aborts the whole batch
        with BulkImportError listing each failing line (1-based).
        """

        ensure_role(actor, _IMPORT_ROLES, "Faculty accounts cannot bulk import students")

        content = (text or "").strip()
        if not content:
            raise ValidationError("Nothing to import")

        existing = self._store.get_students()
        seen_regs = {s.reg_number.lower() for s in existing}
        errors: list[str] = []
        validated: list[Student] = []

        for row_num, line in enumerate(content.splitlines(), start=1):
            parts = [p.strip() for p in line.split(",")]

            if len(parts) < 3:
                errors.append(f"Row {row_num}: Insufficient data (Name, Register, Branch required)")
                continue

            name, reg, branch_raw = parts[0], parts[1], parts[2]
            if not name or not reg or not branch_raw:
                errors.append(f"Row {row_num}: Empty fields detected")
                continue

            branch = normalize_branch(branch_raw)
            if branch is None:
                errors.append(f'Row {row_num}: Invalid branch name "{branch_raw}"')
                continue

            if is_department_scoped(actor) and not can_access(actor.role, actor.department, branch):
                errors.append(f"Row {row_num}: Boundary Violation! You can only upload for {actor.department.value}")
                continue

            if reg.lower() in seen_regs:
                errors.append(f"Row {row_num}: Register number {reg} already exists")
                continue
            seen_regs.add(reg.lower())

            validated.append(
                Student(
                    id=new_id(),
                    name=name,
                    roll_number=reg[-ROLL_NUMBER_SUFFIX_LENGTH:],
                    reg_number=reg,
                    branch=branch,
                    semester=1,
                    section=DEFAULT_SECTION,
                    status=StudentStatus.ACTIVE,
                )
            )

        if errors:
            logger.info("Bulk import by %s rejected: %d error(s)", actor.name, len(errors))
            raise BulkImportError(errors)

        self._store.save_students([*existing, *validated])
        self._audit.log_activity(actor.name, f"Bulk imported {len(validated)} students")
        return ImportResult(created=len(validated), errors=[])
