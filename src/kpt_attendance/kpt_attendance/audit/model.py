from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class ActivityEntry:
    timestamp: datetime
    user: str
    action: str
