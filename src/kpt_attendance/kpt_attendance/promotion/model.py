from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from ..core.enums import CycleType
from ..students.model import Student


@dataclass(frozen=True)
class PromotionLog:
    """A committed promotion run and the full directory state before it.

    `previous_states` is the only source for undo, so it holds every
    student (active and archived) as immutable values.
    """

    id: str
    date: datetime
    performed_by: str
    type: CycleType
    student_count: int
    previous_states: tuple[Student, ...]
    advanced_count: int = 0
    archived_count: int = 0
