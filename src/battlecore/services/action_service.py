"""Skill and item execution with cost, cooldown and charge gating."""
from __future__ import annotations

import logging
from typing import Dict, List, Sequence

from battlecore.domain.battle_models import (
    BattleEnd,
    BattleState,
    ChargeState,
    TauntState,
    UseResult,
    draw_random,
    push_log,
)
from battlecore.domain.content import ContentBundle
from battlecore.domain.defs import ActionDef, ItemDef
from battlecore.domain.entities import Actor
from battlecore.domain.filters import matches
from battlecore.domain.inventory import item_quantity, remove_item
from battlecore.domain.targeting import resolve_targets
from battlecore.services.effect_service import ActionContext, EffectExecutor

logger = logging.getLogger(__name__)

BATTLE_OVER = "battle_over"
NOT_ENTITLED = "not_entitled"
CAN_USE_BLOCKED = "can_use_blocked"
INSUFFICIENT_RESOURCE = "insufficient_resource"
ON_COOLDOWN = "on_cooldown"
NO_CHARGES = "no_charges"
NOT_IN_INVENTORY = "not_in_inventory"
NO_TARGETS = "no_targets"
FLEE_FAILED = "flee_failed"

_END_SUMMARIES = {
    "victory": "Victory! All enemies have been defeated.",
    "defeat": "Defeat... The party has fallen.",
    "fled": "The battle ended in retreat.",
}


def check_battle_end(state: BattleState) -> BattleEnd | None:
    """
    Set ``state.ended`` when one side has no living actors.

    Returns the end marker only when it was set by this call; an already
    ended battle is left untouched.
    """

    if state.ended is not None:
        return None
    players_down = not any(state.actors[actor_id].alive for actor_id in state.side_player)
    enemies_down = not any(state.actors[actor_id].alive for actor_id in state.side_enemy)
    if enemies_down:
        state.ended = BattleEnd(reason="victory")
    elif players_down:
        state.ended = BattleEnd(reason="defeat")
    else:
        return None
    return state.ended


def end_summary(end: BattleEnd) -> str:
    return _END_SUMMARIES[end.reason]


class ActionExecutor:
    """Validates and runs skills and items for an acting actor."""

    def __init__(self, content: ContentBundle, effects: EffectExecutor) -> None:
        self._content = content
        self._effects = effects

    def use_skill(
        self,
        state: BattleState,
        skill: ActionDef,
        actor_id: str,
        explicit_target_ids: Sequence[str] | None = None,
    ) -> UseResult:
        return self._use(state, skill, actor_id, explicit_target_ids)

    def use_item(
        self,
        state: BattleState,
        item: ItemDef,
        actor_id: str,
        explicit_target_ids: Sequence[str] | None = None,
    ) -> UseResult:
        return self._use(state, item, actor_id, explicit_target_ids)

    # -----------------------
    # Validation
    # -----------------------
    def check_usable(self, state: BattleState, action: ActionDef, actor_id: str) -> tuple[str, str] | None:
        """
        Run every validation step except target selection.

        Returns ``(reason, log_line)`` for the first failing step, or None
        when the action may be used. Never mutates state.
        """

        if state.ended is not None:
            return BATTLE_OVER, "The battle is already over."
        actor = state.actors.get(actor_id)
        if actor is None or not actor.alive or actor_id in state.prevented:
            name = actor.name if actor else actor_id
            return NOT_ENTITLED, f"{name} cannot act right now."
        if not matches(actor, action.can_use):
            return CAN_USE_BLOCKED, f"{actor.name} cannot use {action.name} right now."

        costs = action.costs
        if costs.sta > actor.stats.sta:
            return INSUFFICIENT_RESOURCE, f"Not enough STA to use {action.name}."
        if costs.mp > actor.stats.mp:
            return INSUFFICIENT_RESOURCE, f"Not enough MP to use {action.name}."

        remaining_cooldown = state.cooldowns.get(actor_id, {}).get(action.id, 0)
        if remaining_cooldown > 0:
            return ON_COOLDOWN, f"{action.name} is on cooldown ({remaining_cooldown} turns)."

        if costs.charges is not None:
            charge = state.charges.get(actor_id, {}).get(action.id)
            remaining = charge.remaining if charge else costs.charges
            if remaining <= 0:
                return NO_CHARGES, f"{actor.name} has no charges left for {action.name}."

        stock_id, needed = self._inventory_cost(action)
        if stock_id is not None and item_quantity(state, stock_id) < needed:
            stock_def = self._content.items.get(stock_id)
            stock_name = stock_def.name if stock_def else stock_id
            return NOT_IN_INVENTORY, f"No {stock_name} left in the inventory."
        return None

    @staticmethod
    def _inventory_cost(action: ActionDef) -> tuple[str | None, int]:
        if action.costs.item is not None:
            return action.costs.item.item_id, max(1, action.costs.item.qty)
        if isinstance(action, ItemDef):
            return action.id, 1
        return None, 0

    def collect_usable_targets(self, state: BattleState, action: ActionDef, actor_id: str) -> List[str]:
        """Preview the targets ``action`` would pick without consuming randomness."""
        seed = state.rng_seed
        taunts: Dict[str, TauntState] = dict(state.taunts)
        try:
            return resolve_targets(state, action.targeting, actor_id)
        finally:
            state.rng_seed = seed
            state.taunts = taunts

    # -----------------------
    # Execution
    # -----------------------
    def _use(
        self,
        state: BattleState,
        action: ActionDef,
        actor_id: str,
        explicit_target_ids: Sequence[str] | None,
    ) -> UseResult:
        start = len(state.log)
        rejection = self.check_usable(state, action, actor_id)
        if rejection is None:
            targets = resolve_targets(state, action.targeting, actor_id, explicit_target_ids)
            if not targets:
                rejection = NO_TARGETS, f"{action.name} has no valid targets."
        if rejection is not None:
            reason, message = rejection
            logger.debug("%s rejected for %s: %s", action.id, actor_id, reason)
            push_log(state, message)
            return UseResult(ok=False, reason=reason, log=state.log[start:])

        actor = state.actors[actor_id]
        self._pay_costs(state, action, actor)
        push_log(state, f"{actor.name} used {action.name}.")

        context = ActionContext(name=action.name, element=action.element)
        for effect in action.effects:
            if state.ended is not None:
                break
            if effect.selector is not None:
                effect_targets = resolve_targets(state, effect.selector, actor_id)
            else:
                effect_targets = targets
            self._effects.apply_effect(state, effect, actor_id, effect_targets, action=context)

        self.finish_if_over(state)
        return UseResult(ok=True, log=state.log[start:])

    def _pay_costs(self, state: BattleState, action: ActionDef, actor: Actor) -> None:
        costs = action.costs
        actor.stats.sta -= costs.sta
        actor.stats.mp -= costs.mp
        if costs.cooldown > 0:
            state.cooldowns.setdefault(actor.id, {})[action.id] = costs.cooldown
        if costs.charges is not None:
            charges = state.charges.setdefault(actor.id, {})
            charge = charges.get(action.id)
            if charge is None:
                charge = ChargeState(remaining=costs.charges, max=costs.charges)
                charges[action.id] = charge
            charge.remaining -= 1
        stock_id, needed = self._inventory_cost(action)
        consumable = action.consumable if isinstance(action, ItemDef) else True
        if stock_id is not None and consumable:
            remove_item(state, stock_id, needed)

    @staticmethod
    def finish_if_over(state: BattleState) -> None:
        """Settle victory/defeat and append the closing line for a battle that just ended."""
        check_battle_end(state)
        if state.ended is not None:
            push_log(state, end_summary(state.ended))

    # -----------------------
    # Fleeing
    # -----------------------
    def attempt_flee(self, state: BattleState, actor_id: str) -> UseResult:
        """Roll once against the flee chance; success ends the battle as ``fled``."""
        start = len(state.log)
        if state.ended is not None:
            push_log(state, "The battle is already over.")
            return UseResult(ok=False, reason=BATTLE_OVER, log=state.log[start:])
        actor = state.actors.get(actor_id)
        if actor is None or not actor.alive or actor_id in state.prevented:
            push_log(state, f"{actor.name if actor else actor_id} cannot act right now.")
            return UseResult(ok=False, reason=NOT_ENTITLED, log=state.log[start:])

        if draw_random(state) < self._content.balance.flee_base:
            state.ended = BattleEnd(reason="fled")
            push_log(state, f"{actor.name} fled the battle!")
            push_log(state, end_summary(state.ended))
            return UseResult(ok=True, log=state.log[start:])
        push_log(state, f"{actor.name} failed to escape!")
        return UseResult(ok=False, reason=FLEE_FAILED, log=state.log[start:])
