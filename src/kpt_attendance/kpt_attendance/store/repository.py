from __future__ import annotations

from typing import Protocol, Sequence

from ..attendance.model import AttendanceRecord
from ..audit.model import ActivityEntry
from ..faculty.model import Faculty, FacultyAssignment
from ..promotion.model import PromotionLog
from ..students.model import Student
from ..users.model import User


class DirectoryStore(Protocol):
    """Durable collections, read and written whole.

    Note (DIP): services depend on this interface, never on a concrete database.
    Every save call overwrites the full collection and is atomic.
    """

    def get_users(self) -> list[User]:
        raise NotImplementedError

    def save_users(self, users: Sequence[User]) -> None:
        raise NotImplementedError

    def get_students(self) -> list[Student]:
        raise NotImplementedError

    def save_students(self, students: Sequence[Student]) -> None:
        raise NotImplementedError

    def get_faculty(self) -> list[Faculty]:
        raise NotImplementedError

    def save_faculty(self, faculty: Sequence[Faculty]) -> None:
        raise NotImplementedError

    def get_attendance(self) -> list[AttendanceRecord]:
        raise NotImplementedError

    def save_attendance(self, records: Sequence[AttendanceRecord]) -> None:
        raise NotImplementedError

    def get_assignments(self) -> list[FacultyAssignment]:
        raise NotImplementedError

    def save_assignments(self, assignments: Sequence[FacultyAssignment]) -> None:
        raise NotImplementedError

    def get_promotion_logs(self) -> list[PromotionLog]:
        """Newest first."""

        raise NotImplementedError

    def save_promotion_logs(self, logs: Sequence[PromotionLog]) -> None:
        raise NotImplementedError

    def get_subjects(self) -> list[str]:
        raise NotImplementedError

    def save_subjects(self, subjects: Sequence[str]) -> None:
        raise NotImplementedError

    def save_batch(self, **collections: Sequence[object]) -> None:
        """Overwrite several collections in one atomic write.

        Keyword names are collection names: users, students, faculty,
        attendance, assignments, promotion_logs, subjects.
        """

        raise NotImplementedError


class AuditSink(Protocol):
    def log_activity(self, user: str, action: str) -> None:
        """Append-only; keeps the newest AUDIT_LOG_LIMIT entries."""

        raise NotImplementedError

    def list_activity(self, *, limit: int = 100) -> Sequence[ActivityEntry]:
        """Newest first."""

        raise NotImplementedError
