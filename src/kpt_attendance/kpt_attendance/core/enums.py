from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User roles used for authorization."""

    SUPER_ADMIN = "SUPER_ADMIN"
    PRINCIPAL = "PRINCIPAL"
    HOD = "HOD"
    FACULTY = "FACULTY"


class Branch(str, Enum):
    """Academic departments. The value is the display name stored in records."""

    CS = "Computer Science and Engineering"
    AUTO = "Automobile Engineering"
    CHEM = "Chemical Engineering"
    CIVIL = "Civil Engineering"
    EC = "Electronics and Communication Engineering"
    EE = "Electrical and Electronics Engineering"
    MECH = "Mechanical Engineering"
    POLY = "Polymer Technology"


class StudentStatus(str, Enum):
    ACTIVE = "ACTIVE"
    ARCHIVED = "ARCHIVED"


class CycleType(str, Enum):
    """Label attached to a promotion run."""

    ODD = "ODD"
    EVEN = "EVEN"


class MarkStatus(str, Enum):
    """Attendance mark persisted per student and session."""

    PRESENT = "P"
    ABSENT = "A"


class Eligibility(str, Enum):
    ELIGIBLE = "Eligible"
    SHORTAGE = "Shortage"


class RosterSort(str, Enum):
    NAME = "name"
    REGISTRATION = "reg"
