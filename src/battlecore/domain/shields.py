"""Shield buckets that absorb incoming damage before HP."""
from __future__ import annotations

from typing import List, Tuple

from battlecore.domain.battle_models import BattleState, ShieldState
from battlecore.domain.entities import Actor


def grant_shield(
    state: BattleState,
    actor_id: str,
    shield_id: str,
    amount: float,
    element: str | None = None,
    *,
    replace: bool = False,
) -> int:
    """
    Add ``amount`` to (or with ``replace`` set it on) a named shield bucket.

    Returns the bucket's hp afterwards. Replacing with a non-positive amount
    removes the bucket.
    """

    buckets = state.shields.setdefault(actor_id, {})
    safe = max(0, round(amount))
    if replace and safe <= 0:
        buckets.pop(shield_id, None)
        if not buckets:
            state.shields.pop(actor_id, None)
        return 0
    shield = buckets.get(shield_id)
    if shield is None:
        shield = ShieldState(id=shield_id, hp=0, element=element)
        buckets[shield_id] = shield
    shield.hp = safe if replace else shield.hp + safe
    if element is not None:
        shield.element = element
    return shield.hp


def remove_shield(state: BattleState, actor_id: str, shield_id: str) -> None:
    buckets = state.shields.get(actor_id)
    if not buckets:
        return
    buckets.pop(shield_id, None)
    if not buckets:
        del state.shields[actor_id]


def total_shield(state: BattleState, actor_id: str) -> int:
    return sum(shield.hp for shield in state.shields.get(actor_id, {}).values())


def absorb_damage(state: BattleState, actor: Actor, amount: int) -> Tuple[int, int, List[str]]:
    """
    Drain shield buckets in insertion order.

    Returns ``(remaining, absorbed, log_lines)`` where ``remaining`` is the
    damage left over for HP.
    """

    buckets = state.shields.get(actor.id)
    remaining = max(0, amount)
    if not buckets or remaining <= 0:
        return remaining, 0, []

    absorbed_lines: List[str] = []
    shattered_lines: List[str] = []
    for shield_id in list(buckets):
        if remaining <= 0:
            break
        shield = buckets[shield_id]
        if shield.hp <= 0:
            del buckets[shield_id]
            continue
        absorbed = min(remaining, shield.hp)
        shield.hp -= absorbed
        remaining -= absorbed
        absorbed_lines.append(f"{actor.name}'s {shield_id} absorbed {absorbed} damage.")
        if shield.hp <= 0:
            del buckets[shield_id]
            shattered_lines.append(f"{actor.name}'s {shield_id} shattered.")
    if not buckets:
        del state.shields[actor.id]
    return remaining, max(0, amount) - remaining, absorbed_lines + shattered_lines
