"""Bundle of compiled definitions consumed by the battle engine."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict

from battlecore.domain.defs import Balance, ClassDef, EnemyDef, ItemDef, SkillDef, StatusTemplate


@dataclass(slots=True)
class ContentBundle:
    """Read-only definitions shared by every battle built from one load."""

    balance: Balance = field(default_factory=Balance)
    skills: Dict[str, SkillDef] = field(default_factory=dict)
    items: Dict[str, ItemDef] = field(default_factory=dict)
    statuses: Dict[str, StatusTemplate] = field(default_factory=dict)
    enemies: Dict[str, EnemyDef] = field(default_factory=dict)
    classes: Dict[str, ClassDef] = field(default_factory=dict)
