from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.service import AttendanceService
from .audit.service import AuditService
from .database.connection import DBConfig, DatabaseConnection
from .faculty.service import FacultyService
from .promotion.service import PromotionService
from .reports.service import ReportService
from .store.mysql_store import MySQLAuditSink, MySQLDirectoryStore
from .store.repository import AuditSink, DirectoryStore
from .students.service import StudentService
from .users.service import AuthService, UserService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    store: DirectoryStore
    audit: AuditSink

    auth_service: AuthService
    user_service: UserService
    student_service: StudentService
    faculty_service: FacultyService
    attendance_service: AttendanceService
    promotion_service: PromotionService
    report_service: ReportService
    audit_service: AuditService

    report_file_prefix: str = "KPT_Report"


def build_container(
    *,
    db_config: Optional[dict] = None,
    store: Optional[DirectoryStore] = None,
    audit: Optional[AuditSink] = None,
    default_faculty_password: str = "password123",
    report_file_prefix: str = "KPT_Report",
) -> Container:
    """Wire services over MySQL, or over the given store and audit sink."""

    conn: Optional[DatabaseConnection] = None
    if store is None or audit is None:
        if db_config is None:
            raise ValueError("db_config is required when no store/audit is given")
        conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
        store = store or MySQLDirectoryStore(conn)
        audit = audit or MySQLAuditSink(conn)

    return Container(
        conn=conn,
        store=store,
        audit=audit,
        auth_service=AuthService(store),
        user_service=UserService(store, audit),
        student_service=StudentService(store, audit),
        faculty_service=FacultyService(store, audit, default_password=default_faculty_password),
        attendance_service=AttendanceService(store, audit),
        promotion_service=PromotionService(store, audit),
        report_service=ReportService(store),
        audit_service=AuditService(audit),
        report_file_prefix=report_file_prefix,
    )
