"""Deterministic level scaling for definition stat blocks."""
from __future__ import annotations

from battlecore.domain.defs import StatBlock
from battlecore.domain.entities import Stats


def scale_stats(base: StatBlock, scale: StatBlock | None, *, level: int) -> Stats:
    """Return full-resource stats for ``base + scale * level``."""
    level = max(1, level)
    growth = scale or StatBlock(max_hp=0)
    max_hp = max(1, base.max_hp + growth.max_hp * level)
    max_sta = max(0, base.max_sta + growth.max_sta * level)
    max_mp = max(0, base.max_mp + growth.max_mp * level)
    return Stats(
        max_hp=max_hp,
        hp=max_hp,
        max_sta=max_sta,
        sta=max_sta,
        max_mp=max_mp,
        mp=max_mp,
        atk=max(0, base.atk + growth.atk * level),
        defense=max(0, base.defense + growth.defense * level),
        lv=level,
    )
