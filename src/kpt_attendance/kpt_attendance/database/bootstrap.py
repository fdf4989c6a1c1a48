from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable

import mysql.connector

from ..core.enums import Branch, Role, StudentStatus
from ..faculty.model import Faculty, FacultyAssignment
from ..store.repository import DirectoryStore
from ..students.model import Student
from ..users.model import User
from .connection import DBConfig

logger = logging.getLogger(__name__)


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal SQL splitter for schema files (handles ';' inside quotes, skips -- comments).
    buf: list[str] = []
    in_single = False
    in_double = False
    escape = False

    lines = [ln for ln in sql.splitlines() if not ln.lstrip().startswith("--")]
    for ch in "\n".join(lines):
        if escape:
            buf.append(ch)
            escape = False
            continue

        if ch == "\\":
            buf.append(ch)
            escape = True
            continue

        if ch == "'" and not in_double:
            in_single = not in_single
            buf.append(ch)
            continue

        if ch == '"' and not in_single:
            in_double = not in_double
            buf.append(ch)
            continue

        if ch == ";" and not in_single and not in_double:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue

        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _connect(target: DBConfig, *, with_database: bool = True):
    return mysql.connector.connect(use_pure=True, **target.connect_kwargs(with_database=with_database))


def ensure_database_exists(db_config: dict) -> None:
    target = DBConfig.from_dict(db_config)
    conn = _connect(target, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    target = DBConfig.from_dict(db_config)
    ensure_database_exists(db_config)

    sql = _strip_create_db_and_use(Path(schema_path).read_text(encoding="utf-8"))

    conn = _connect(target)
    try:
        cur = conn.cursor()
        for stmt in _iter_sql_statements(sql):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()


def list_tables(db_config: dict) -> list[str]:
    conn = _connect(DBConfig.from_dict(db_config))
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()


DEMO_PASSWORD = "password123"

DEMO_SUBJECTS = [
    "Data Structures", "Microprocessors", "C Programming", "Operating Systems", "Cloud Computing",
    "Fluid Mechanics", "Thermodynamics", "Digital Electronics", "Network Analysis", "Control Systems",
    "Manufacturing Processes", "Machine Design", "Heat Transfer", "Theory of Machines",
    "Chemical Process Principles", "Mass Transfer", "Chemical Reaction Engineering", "Process Control",
]

_DEMO_STUDENT_NAMES = {
    Branch.CS: ["Arjun Sharma", "Rohan Varma", "Priya Lakshmi", "Ananya Hegde", "Vikram Reddy", "Sai Krishna"],
    Branch.EC: ["Abhinav M.", "Bhaskar T.", "Darshan K.", "Eshwar L.", "Fathima Z.", "Girish B."],
    Branch.MECH: ["Siddharth Rao", "Aditya Kulkarni", "Shruti Shetty", "Gautam Iyer", "Varun Prabhu", "Tanvi Naik"],
    Branch.CHEM: ["Megha S. Rai", "Deepak Soman", "Preethi Kulal", "Akshay Bhat", "Bindu Shenoy", "Chetan M."],
}

_DEMO_BRANCH_SUBJECTS = {
    Branch.CS: ("Data Structures", "C Programming"),
    Branch.EC: ("Digital Electronics", "Network Analysis"),
    Branch.MECH: ("Thermodynamics", "Machine Design"),
    Branch.CHEM: ("Mass Transfer", "Process Control"),
}

_BRANCH_PREFIX = {Branch.CS: "CS", Branch.EC: "EC", Branch.MECH: "ME", Branch.CHEM: "CH"}


def _demo_users() -> list[User]:
    users = [
        User(id="u-admin", username="admin", password=DEMO_PASSWORD, role=Role.SUPER_ADMIN, name="Super Admin"),
        User(id="u-principal", username="principal", password=DEMO_PASSWORD, role=Role.PRINCIPAL, name="Dr. Srinivasa Rao"),
        User(id="hod-cs", username="hodcs", password=DEMO_PASSWORD, role=Role.HOD, name="Prof. Rajeshwari K.", department=Branch.CS),
        User(id="hod-ec", username="hodec", password=DEMO_PASSWORD, role=Role.HOD, name="Prof. Mahesh Bhat", department=Branch.EC),
        User(id="hod-me", username="hodme", password=DEMO_PASSWORD, role=Role.HOD, name="Prof. Vinay Kumar", department=Branch.MECH),
        User(id="hod-ch", username="hodch", password=DEMO_PASSWORD, role=Role.HOD, name="Prof. Prema Shanthi", department=Branch.CHEM),
    ]
    faculty_names = {
        Branch.CS: ["Suresh Kumar", "Priya D'Souza"],
        Branch.EC: ["Kavitha Shenoy", "Ganesh Prabhu"],
        Branch.MECH: ["Sandeep Shet", "Manoj Karkera"],
        Branch.CHEM: ["Dr. Amit Trivedi", "Sunitha Shetty"],
    }
    for branch, names in faculty_names.items():
        prefix = _BRANCH_PREFIX[branch]
        for i, name in enumerate(names, start=1):
            users.append(
                User(
                    id=f"fac-{prefix.lower()}-{i}",
                    username=f"fac{prefix.lower()}{i}",
                    password=DEMO_PASSWORD,
                    role=Role.FACULTY,
                    name=name,
                    department=branch,
                    employee_id=f"EMP_{prefix}_{i:03d}",
                )
            )
    return users


def _demo_students() -> list[Student]:
    students: list[Student] = []
    for branch, names in _DEMO_STUDENT_NAMES.items():
        prefix = _BRANCH_PREFIX[branch]
        for i, name in enumerate(names, start=1):
            students.append(
                Student(
                    id=f"std-{prefix.lower()}-{i:03d}",
                    name=name,
                    roll_number=f"{prefix}{i:02d}",
                    reg_number=f"103{prefix}23{i:03d}",
                    branch=branch,
                    semester=1,
                    section="A",
                    status=StudentStatus.ACTIVE,
                )
            )
    return students


def ensure_demo_directory(store: DirectoryStore) -> None:
    """Seed demo accounts, students, faculty and subjects into empty collections."""

    users = store.get_users()
    if not users:
        users = _demo_users()
        store.save_users(users)
        logger.info("Seeded %d demo users", len(users))

    if not store.get_students():
        store.save_students(_demo_students())

    if not store.get_faculty():
        store.save_faculty(
            [
                Faculty(
                    id=u.id,
                    name=u.name,
                    department=u.department,
                    employee_id=u.employee_id or u.username,
                    subjects=_DEMO_BRANCH_SUBJECTS.get(u.department, ()),
                )
                for u in users
                if u.role == Role.FACULTY and u.department is not None
            ]
        )

    if not store.get_subjects():
        store.save_subjects(DEMO_SUBJECTS)

    if not store.get_assignments():
        # Each demo faculty teaches their branch's first-semester subjects.
        store.save_assignments(
            [
                FacultyAssignment(
                    id=f"asgn-{f.id}-{i}",
                    faculty_id=f.id,
                    branch=f.department,
                    semester=1,
                    subject=subject,
                )
                for f in store.get_faculty()
                for i, subject in enumerate(f.subjects, start=1)
            ]
        )
