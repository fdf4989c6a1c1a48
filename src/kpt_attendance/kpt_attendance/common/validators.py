from __future__ import annotations

from ..core.constants import SEMESTERS
from ..core.enums import Branch
from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_semester(value: int | str) -> int:
    try:
        semester = int(value)
    except (TypeError, ValueError):
        raise ValidationError("Semester must be a number")
    if semester not in SEMESTERS:
        raise ValidationError(f"Semester must be between {SEMESTERS[0]} and {SEMESTERS[-1]}")
    return semester


def require_branch(value: Branch | str) -> Branch:
    """Accept a Branch, its code (``CS``) or its display name."""

    if isinstance(value, Branch):
        return value
    raw = (value or "").strip()
    if raw in Branch.__members__:
        return Branch[raw]
    try:
        return Branch(raw)
    except ValueError:
        raise ValidationError(f"Unknown branch: {raw!r}")
