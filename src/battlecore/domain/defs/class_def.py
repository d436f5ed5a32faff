"""Player class preset definitions."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

from .enemy_def import DropDef, StatBlock


@dataclass(slots=True)
class ClassDef:
    """Starting stats, skills and items for a playable class."""

    id: str
    name: str
    base: StatBlock = field(default_factory=StatBlock)
    skills: Tuple[str, ...] = ()
    start_items: Tuple[DropDef, ...] = ()
