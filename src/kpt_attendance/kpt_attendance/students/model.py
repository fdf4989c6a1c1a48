from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import Branch, StudentStatus


@dataclass(frozen=True)
class Student:
    """Domain entity: enrolled student.

    `reg_number` is the immutable business key.
    """

    id: str
    name: str
    roll_number: str
    reg_number: str
    branch: Branch
    semester: int
    section: str = "A"
    age: int = 18
    status: StudentStatus = StudentStatus.ACTIVE

    @property
    def is_archived(self) -> bool:
        return self.status == StudentStatus.ARCHIVED


@dataclass(frozen=True)
class ImportResult:
    created: int
    errors: list[str]
