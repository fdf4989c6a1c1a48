from __future__ import annotations

from datetime import datetime
from typing import Sequence

import pytest

from src.kpt_attendance.kpt_attendance.audit.model import ActivityEntry
from src.kpt_attendance.kpt_attendance.core.constants import AUDIT_LOG_LIMIT


class InMemoryDirectoryStore:
    """Dict-backed DirectoryStore. Every get returns a fresh list."""

    COLLECTIONS = ("users", "students", "faculty", "attendance", "assignments", "promotion_logs", "subjects")

    def __init__(self, **initial: Sequence[object]):
        self.data: dict[str, list] = {name: [] for name in self.COLLECTIONS}
        self.writes: list[tuple[str, ...]] = []
        for name, items in initial.items():
            self.data[name] = list(items)

    def save_batch(self, **collections: Sequence[object]) -> None:
        unknown = set(collections) - set(self.COLLECTIONS)
        if unknown:
            raise KeyError(sorted(unknown))
        for name, items in collections.items():
            self.data[name] = list(items)
        self.writes.append(tuple(sorted(collections)))

    def get_users(self):
        return list(self.data["users"])

    def save_users(self, users):
        self.save_batch(users=users)

    def get_students(self):
        return list(self.data["students"])

    def save_students(self, students):
        self.save_batch(students=students)

    def get_faculty(self):
        return list(self.data["faculty"])

    def save_faculty(self, faculty):
        self.save_batch(faculty=faculty)

    def get_attendance(self):
        return list(self.data["attendance"])

    def save_attendance(self, records):
        self.save_batch(attendance=records)

    def get_assignments(self):
        return list(self.data["assignments"])

    def save_assignments(self, assignments):
        self.save_batch(assignments=assignments)

    def get_promotion_logs(self):
        return list(self.data["promotion_logs"])

    def save_promotion_logs(self, logs):
        self.save_batch(promotion_logs=logs)

    def get_subjects(self):
        return list(self.data["subjects"])

    def save_subjects(self, subjects):
        self.save_batch(subjects=subjects)


class InMemoryAudit:
    def __init__(self, limit: int = AUDIT_LOG_LIMIT):
        self.entries: list[ActivityEntry] = []
        self._limit = limit

    def log_activity(self, user: str, action: str) -> None:
        self.entries.insert(0, ActivityEntry(timestamp=datetime.now(), user=user, action=action))
        del self.entries[self._limit:]

    def list_activity(self, *, limit: int = AUDIT_LOG_LIMIT):
        return self.entries[:limit]

    @property
    def actions(self) -> list[str]:
        return [e.action for e in self.entries]


@pytest.fixture
def store() -> InMemoryDirectoryStore:
    return InMemoryDirectoryStore()


@pytest.fixture
def audit() -> InMemoryAudit:
    return InMemoryAudit()


@pytest.fixture
def fixed_now() -> datetime:
    # A Monday.
    return datetime(2025, 1, 6, 9, 30)
