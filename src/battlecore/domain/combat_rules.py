"""Pure combat math over stats and the active balance table."""
from __future__ import annotations

import math

from battlecore.domain.defs import Balance
from battlecore.domain.entities import Actor

# Hit chance moves 2% per level of difference and 1% per point of atk over def.
HIT_PER_LEVEL = 0.02
HIT_PER_STAT = 0.01
# Crit chance only ever grows: 1% per level advantage, 0.5% per point of atk over def.
CRIT_PER_LEVEL = 0.01
CRIT_PER_STAT = 0.005


def clamp(value: float, minimum: float, maximum: float) -> float:
    if not math.isfinite(value):
        return minimum
    return max(minimum, min(maximum, value))


def hit_chance(balance: Balance, user: Actor, target: Actor, dodge_bonus: float = 0.0) -> float:
    level_diff = (user.stats.lv - target.stats.lv) * HIT_PER_LEVEL
    stat_diff = (user.stats.atk - target.stats.defense) * HIT_PER_STAT
    chance = clamp(balance.base_hit + level_diff + stat_diff, balance.dodge_floor, balance.hit_ceil)
    return clamp(chance - dodge_bonus, 0.0, 1.0)


def crit_chance(balance: Balance, user: Actor, target: Actor, crit_bonus: float = 0.0) -> float:
    level_bonus = max(0, user.stats.lv - target.stats.lv) * CRIT_PER_LEVEL
    stat_bonus = max(0, user.stats.atk - target.stats.defense) * CRIT_PER_STAT
    chance = clamp(balance.base_crit + level_bonus + stat_bonus, 0.0, 1.0)
    return clamp(chance + crit_bonus, 0.0, 1.0)


def element_mult(balance: Balance, element: str | None, target: Actor) -> float:
    """Multiplier for ``element`` against the first matching target tag."""
    if not element:
        return 1.0
    table = balance.element_matrix.get(element)
    if not table:
        return 1.0
    for tag in target.tags:
        if tag in table:
            return float(table[tag])
    return float(table.get("neutral", 1.0))


def tag_resist_mult(balance: Balance, target: Actor) -> float:
    multiplier = 1.0
    for tag in target.tags:
        value = balance.resists_by_tag.get(tag)
        if value is not None:
            multiplier *= value
    return multiplier


__all__ = ["clamp", "crit_chance", "element_mult", "hit_chance", "tag_resist_mult"]
