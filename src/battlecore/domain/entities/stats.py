"""Stat models for runtime entities."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

# Content refers to stats by their camelCase names.
STAT_ATTRS = {
    "maxHp": "max_hp",
    "hp": "hp",
    "maxSta": "max_sta",
    "sta": "sta",
    "maxMp": "max_mp",
    "mp": "mp",
    "atk": "atk",
    "def": "defense",
    "lv": "lv",
    "xp": "xp",
    "gold": "gold",
}

RESOURCE_ATTRS = {
    "hp": ("hp", "max_hp"),
    "sta": ("sta", "max_sta"),
    "mp": ("mp", "max_mp"),
}


@dataclass(slots=True)
class Stats:
    """Stores combat stats and the three depletable resources."""

    max_hp: int
    hp: int
    max_sta: int = 0
    sta: int = 0
    max_mp: int = 0
    mp: int = 0
    atk: int = 0
    defense: int = 0
    lv: int = 1
    xp: int = 0
    gold: int = 0

    def get(self, key: str) -> int | None:
        """Return a stat by its content name (``maxHp``, ``def``...) or None."""
        attr = STAT_ATTRS.get(key)
        if attr is None:
            return None
        return getattr(self, attr)

    def resource(self, resource: str) -> Tuple[int, int]:
        """Return ``(current, maximum)`` for ``hp``, ``sta`` or ``mp``."""
        current_attr, max_attr = RESOURCE_ATTRS.get(resource, RESOURCE_ATTRS["hp"])
        return getattr(self, current_attr), getattr(self, max_attr)

    def set_resource(self, resource: str, value: int) -> int:
        """Set a resource clamped to ``[0, max]`` and return the stored value."""
        current_attr, max_attr = RESOURCE_ATTRS.get(resource, RESOURCE_ATTRS["hp"])
        maximum = getattr(self, max_attr)
        clamped = max(0, min(maximum, value))
        setattr(self, current_attr, clamped)
        return clamped
