"""Shared battle inventory helpers."""
from __future__ import annotations

from typing import List

from battlecore.domain.battle_models import BattleState, InventoryEntry


def _find(entries: List[InventoryEntry], item_id: str) -> InventoryEntry | None:
    for entry in entries:
        if entry.item_id == item_id:
            return entry
    return None


def item_quantity(state: BattleState, item_id: str) -> int:
    entry = _find(state.inventory, item_id)
    return entry.qty if entry else 0


def add_item(state: BattleState, item_id: str, quantity: int = 1) -> None:
    if quantity <= 0:
        return
    entry = _find(state.inventory, item_id)
    if entry is None:
        state.inventory.append(InventoryEntry(item_id=item_id, qty=quantity))
    else:
        entry.qty += quantity


def remove_item(state: BattleState, item_id: str, quantity: int = 1) -> bool:
    """Remove ``quantity`` units; returns False (and changes nothing) when short."""
    if quantity <= 0:
        return True
    entry = _find(state.inventory, item_id)
    if entry is None or entry.qty < quantity:
        return False
    entry.qty -= quantity
    if entry.qty == 0:
        state.inventory.remove(entry)
    return True


def take_up_to(state: BattleState, item_id: str, quantity: int) -> int:
    """Remove as many units as available up to ``quantity`` and return how many were taken."""
    available = item_quantity(state, item_id)
    taken = min(available, max(0, quantity))
    if taken:
        remove_item(state, item_id, taken)
    return taken
