from __future__ import annotations

from typing import Optional

from ..core.enums import Branch

BRANCH_ALIASES: dict[str, Branch] = {
    "cs": Branch.CS, "cse": Branch.CS, "computer science": Branch.CS,
    "computer science and engineering": Branch.CS,
    "auto": Branch.AUTO, "automobile": Branch.AUTO, "automobile engineering": Branch.AUTO,
    "chem": Branch.CHEM, "chemical": Branch.CHEM, "chemical engineering": Branch.CHEM,
    "civil": Branch.CIVIL, "civil engineering": Branch.CIVIL,
    "ec": Branch.EC, "ece": Branch.EC, "electronics": Branch.EC,
    "electronics and communication": Branch.EC, "electronics and communication engineering": Branch.EC,
    "ee": Branch.EE, "eee": Branch.EE, "electrical": Branch.EE,
    "electrical and electronics": Branch.EE, "electrical and electronics engineering": Branch.EE,
    "mech": Branch.MECH, "mechanical": Branch.MECH, "mechanical engineering": Branch.MECH,
    "poly": Branch.POLY, "polymer": Branch.POLY, "polymer technology": Branch.POLY,
}


def normalize_branch(raw: str) -> Optional[Branch]:
    """Map a free-text alias ("cse", " Computer Science ") to a Branch, or None."""

    return BRANCH_ALIASES.get((raw or "").strip().lower())
