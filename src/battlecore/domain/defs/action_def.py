"""Shared structure of skills and items."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

from .effect_def import EffectDef
from .filter_def import Filter
from .selector_def import TargetSelector


@dataclass(slots=True)
class ItemCost:
    item_id: str
    qty: int = 1


@dataclass(slots=True)
class ActionCost:
    """Resources and limits consumed by using an action."""

    sta: int = 0
    mp: int = 0
    item: ItemCost | None = None
    cooldown: int = 0
    charges: int | None = None  # None means unlimited uses


@dataclass(slots=True)
class ActionDef:
    """Base definition for anything an actor can use in battle."""

    id: str
    name: str
    targeting: TargetSelector = field(default_factory=TargetSelector)
    effects: Tuple[EffectDef, ...] = ()
    element: str | None = None
    can_use: Filter | None = None
    costs: ActionCost = field(default_factory=ActionCost)
    ai_weight: float = 1.0
    description: str = ""

    @property
    def action_type(self) -> str:
        return "action"
