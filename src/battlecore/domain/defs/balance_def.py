"""Balance table consumed by the combat rules."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict


def _default_element_matrix() -> Dict[str, Dict[str, float]]:
    return {"neutral": {"neutral": 1.0}}


@dataclass(slots=True)
class Balance:
    """Tunable combat constants."""

    base_hit: float = 0.85
    base_crit: float = 0.05
    crit_mult: float = 1.5
    dodge_floor: float = 0.05
    hit_ceil: float = 0.99
    element_matrix: Dict[str, Dict[str, float]] = field(default_factory=_default_element_matrix)
    resists_by_tag: Dict[str, float] = field(default_factory=dict)
    flee_base: float = 0.25
