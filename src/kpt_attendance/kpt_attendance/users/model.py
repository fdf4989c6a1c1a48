from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Branch, Role


@dataclass(frozen=True)
class User:
    """Domain entity: login account.

    Note: the password is stored and compared in plaintext.
    """

    id: str
    username: str
    password: str
    role: Role
    name: str
    department: Optional[Branch] = None
    employee_id: Optional[str] = None
