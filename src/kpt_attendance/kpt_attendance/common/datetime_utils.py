from __future__ import annotations

from datetime import date, datetime

from ..core.constants import NON_OPERATING_WEEKDAY


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def is_non_operating_day(day: date) -> bool:
    return day.weekday() == NON_OPERATING_WEEKDAY
