"""Effect definition primitives."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

from .filter_def import Filter
from .selector_def import TargetSelector


@dataclass(slots=True)
class ValueSpec:
    """
    Magnitude of an effect.

    ``percent`` is authored as a whole percentage (25 means a quarter of the
    relevant maximum). ``minimum``/``maximum`` clamp the resolved amount.
    """

    kind: str = "flat"
    amount: float = 0
    percent: float = 0
    expr: str | None = None
    minimum: float | None = None
    maximum: float | None = None


@dataclass(slots=True)
class EffectDef:
    """One atomic outcome caused by an action or a status hook."""

    kind: str
    value: ValueSpec = field(default_factory=ValueSpec)
    element: str | None = None
    can_miss: bool = True
    can_crit: bool = False
    shared_accuracy_roll: bool = False
    resource: str | None = None
    stat: str | None = None
    status_id: str | None = None
    status_turns: int | None = None
    cleanse_tags: Tuple[str, ...] | None = None
    shield_id: str | None = None
    summon_id: str | None = None
    item_id: str | None = None
    message: str | None = None
    selector: TargetSelector | None = None
    only_if: Filter | None = None
