"""Enemy definition structures."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple


@dataclass(slots=True)
class StatBlock:
    """Base (or per-level) combat stats of a definition."""

    max_hp: int = 1
    max_sta: int = 0
    max_mp: int = 0
    atk: int = 0
    defense: int = 0


@dataclass(slots=True)
class DropDef:
    item_id: str
    qty: int = 1


@dataclass(slots=True)
class EnemyDef:
    """Defines an enemy template whose stats grow with level."""

    id: str
    name: str
    base: StatBlock = field(default_factory=StatBlock)
    scale: StatBlock = field(default_factory=lambda: StatBlock(max_hp=0))
    skills: Tuple[str, ...] = ()
    drops: Tuple[DropDef, ...] = ()
    tags: Tuple[str, ...] = ()
