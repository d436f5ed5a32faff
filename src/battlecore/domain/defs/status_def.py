"""Status template structures."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Tuple

from .effect_def import EffectDef

HOOK_ATTRS = {
    "onTurnStart": "on_turn_start",
    "onTurnEnd": "on_turn_end",
    "onDealDamage": "on_deal_damage",
    "onTakeDamage": "on_take_damage",
    "onApply": "on_apply",
    "onExpire": "on_expire",
}


@dataclass(slots=True)
class ShieldSpec:
    id: str
    hp: int
    element: str | None = None


@dataclass(slots=True)
class StatusModifiers:
    """Passive modifiers granted per stack while a status is active."""

    atk: int = 0
    defense: int = 0
    damage_taken_pct: Dict[str, float] = field(default_factory=dict)
    damage_dealt_pct: Dict[str, float] = field(default_factory=dict)
    resource_regen_per_turn: Dict[str, int] = field(default_factory=dict)
    dodge_bonus: float = 0.0
    crit_chance_bonus: float = 0.0
    shield: ShieldSpec | None = None


@dataclass(slots=True)
class StatusHooks:
    on_turn_start: Tuple[EffectDef, ...] = ()
    on_turn_end: Tuple[EffectDef, ...] = ()
    on_deal_damage: Tuple[EffectDef, ...] = ()
    on_take_damage: Tuple[EffectDef, ...] = ()
    on_apply: Tuple[EffectDef, ...] = ()
    on_expire: Tuple[EffectDef, ...] = ()

    def get(self, hook: str) -> Tuple[EffectDef, ...]:
        attr = HOOK_ATTRS.get(hook)
        if attr is None:
            return ()
        return getattr(self, attr)


@dataclass(slots=True)
class StatusTemplate:
    """Compiled, read-only description of a status effect."""

    id: str
    name: str
    tags: Tuple[str, ...] = ()
    max_stacks: int | None = None
    stack_rule: str = "renew"
    duration_turns: int | None = None
    modifiers: StatusModifiers = field(default_factory=StatusModifiers)
    hooks: StatusHooks = field(default_factory=StatusHooks)
    description: str = ""
