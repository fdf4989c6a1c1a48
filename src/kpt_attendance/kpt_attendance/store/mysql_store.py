from __future__ import annotations

import json
from datetime import datetime
from typing import Any, Sequence

from ..attendance.model import AttendanceRecord
from ..audit.model import ActivityEntry
from ..core.constants import AUDIT_LOG_LIMIT
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from ..faculty.model import Faculty, FacultyAssignment
from ..promotion.model import PromotionLog
from ..students.model import Student
from ..users.model import User
from .codec import DECODERS, ENCODERS
from .repository import AuditSink, DirectoryStore


class MySQLDirectoryStore(DirectoryStore):
    """Each collection is one JSON document row in `directory_collections`."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _load(self, name: str) -> list[Any]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT payload FROM directory_collections WHERE name=%s", (name,))
            row = fetchone(cur)
        if not row or not row.get("payload"):
            return []
        decode = DECODERS[name]
        return [decode(item) for item in json.loads(row["payload"])]

    @staticmethod
    def _encode(name: str, items: Sequence[Any]) -> str:
        if name not in ENCODERS:
            raise KeyError(f"Unknown collection: {name}")
        encode = ENCODERS[name]
        return json.dumps([encode(item) for item in items], ensure_ascii=False)

    @staticmethod
    def _upsert(cur, name: str, payload: str) -> None:
        cur.execute(
            """
            INSERT INTO directory_collections(name, payload, updated_at)
            VALUES(%s, %s, %s)
            ON DUPLICATE KEY UPDATE payload=VALUES(payload), updated_at=VALUES(updated_at)
            """,
            (name, payload, datetime.now()),
        )

    def save_batch(self, **collections: Sequence[Any]) -> None:
        encoded = {name: self._encode(name, items) for name, items in collections.items()}
        with db_cursor(self._conn_factory) as (_, cur):
            for name, payload in encoded.items():
                self._upsert(cur, name, payload)

    def get_users(self) -> list[User]:
        return self._load("users")

    def save_users(self, users: Sequence[User]) -> None:
        self.save_batch(users=users)

    def get_students(self) -> list[Student]:
        return self._load("students")

    def save_students(self, students: Sequence[Student]) -> None:
        self.save_batch(students=students)

    def get_faculty(self) -> list[Faculty]:
        return self._load("faculty")

    def save_faculty(self, faculty: Sequence[Faculty]) -> None:
        self.save_batch(faculty=faculty)

    def get_attendance(self) -> list[AttendanceRecord]:
        return self._load("attendance")

    def save_attendance(self, records: Sequence[AttendanceRecord]) -> None:
        self.save_batch(attendance=records)

    def get_assignments(self) -> list[FacultyAssignment]:
        return self._load("assignments")

    def save_assignments(self, assignments: Sequence[FacultyAssignment]) -> None:
        self.save_batch(assignments=assignments)

    def get_promotion_logs(self) -> list[PromotionLog]:
        return self._load("promotion_logs")

    def save_promotion_logs(self, logs: Sequence[PromotionLog]) -> None:
        self.save_batch(promotion_logs=logs)

    def get_subjects(self) -> list[str]:
        return self._load("subjects")

    def save_subjects(self, subjects: Sequence[str]) -> None:
        self.save_batch(subjects=subjects)


class MySQLAuditSink(AuditSink):
    def __init__(self, conn_factory: DatabaseConnection, *, limit: int = AUDIT_LOG_LIMIT):
        self._conn_factory = conn_factory
        self._limit = int(limit)

    def log_activity(self, user: str, action: str) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO activity_log(created_at, user_name, action) VALUES(%s,%s,%s)",
                (datetime.now(), user, action),
            )
            # Keep only the newest entries; the derived table works around
            # MySQL's restriction on LIMIT inside IN subqueries.
            cur.execute(
                """
                DELETE FROM activity_log
                WHERE entry_id NOT IN (
                    SELECT entry_id FROM (
                        SELECT entry_id FROM activity_log ORDER BY entry_id DESC LIMIT %s
                    ) AS newest
                )
                """,
                (self._limit,),
            )

    def list_activity(self, *, limit: int = AUDIT_LOG_LIMIT) -> Sequence[ActivityEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT created_at, user_name, action
                FROM activity_log
                ORDER BY entry_id DESC
                LIMIT %s
                """,
                (int(limit),),
            )
            rows = fetchall(cur)
            return [ActivityEntry(timestamp=r["created_at"], user=r["user_name"], action=r["action"]) for r in rows]
