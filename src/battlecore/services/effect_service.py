"""Applies compiled effects to resolved targets."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Sequence

from battlecore.domain import combat_rules
from battlecore.domain.battle_models import BattleEnd, BattleState, TauntState, draw_random, push_log
from battlecore.domain.content import ContentBundle
from battlecore.domain.defs import EffectDef
from battlecore.domain.entities import Actor
from battlecore.domain.filters import matches
from battlecore.domain.inventory import add_item, take_up_to
from battlecore.domain.shields import absorb_damage, grant_shield
from battlecore.domain.status_modifiers import crit_chance_bonus, dodge_bonus, modifier_multiplier
from battlecore.domain.value_resolver import resolve
from battlecore.services.factories import create_enemy_actor, make_instance_id
from battlecore.services.status_service import HookContext, StatusEngine

logger = logging.getLogger(__name__)

# Effects that act on the battle as a whole run once, whatever the target count.
_ONCE_PER_EFFECT = ("flee", "summon", "giveItem", "removeItem")

_MODIFIABLE_STATS = {
    "atk": ("atk", None, 0),
    "def": ("defense", None, 0),
    "maxHp": ("max_hp", "hp", 1),
    "maxSta": ("max_sta", "sta", 0),
    "maxMp": ("max_mp", "mp", 0),
}


@dataclass(slots=True)
class ActionContext:
    """Per-action data the effects of one action share."""

    name: str = ""
    element: str | None = None


@dataclass(slots=True)
class _AccuracyRoll:
    hit: float
    crit: float


class EffectExecutor:
    """Mutates battle state for one effect at a time and records what happened."""

    def __init__(self, content: ContentBundle) -> None:
        self._content = content
        self._balance = content.balance
        self.statuses = StatusEngine(content, self)
        self._handlers: Dict[str, Callable[..., None]] = {
            "damage": self._damage,
            "heal": self._heal,
            "resource": self._resource,
            "applyStatus": self._apply_status,
            "cleanseStatus": self._cleanse,
            "dispel": self._dispel,
            "modifyStat": self._modify_stat,
            "shield": self._shield,
            "taunt": self._taunt,
            "revive": self._revive,
            "preventAction": self._prevent_action,
        }

    def apply_effect(
        self,
        state: BattleState,
        effect: EffectDef,
        user_id: str,
        target_ids: Sequence[str],
        *,
        action: ActionContext | None = None,
        hook: HookContext | None = None,
    ) -> None:
        """
        Apply ``effect`` from ``user_id`` to each of ``target_ids`` in order.

        ``onlyIf`` gates every target on its own. Battle-wide kinds (flee,
        summon and inventory changes) run once. Nothing happens once the
        battle has ended.
        """

        if state.ended is not None:
            return
        user = state.actors.get(user_id)
        if user is None:
            logger.warning("Effect %s has no user '%s' in the roster", effect.kind, user_id)
            return
        action = action or ActionContext()

        if effect.kind in _ONCE_PER_EFFECT:
            if matches(user, effect.only_if):
                self._apply_once(state, effect, user, action, hook)
            return

        handler = self._handlers.get(effect.kind)
        if handler is None:
            logger.debug("Unsupported effect kind '%s'", effect.kind)
            return

        shared_roll = None
        if effect.kind == "damage" and effect.shared_accuracy_roll and hook is None:
            shared_roll = _AccuracyRoll(hit=draw_random(state), crit=draw_random(state))

        for target_id in target_ids:
            if state.ended is not None:
                return
            target = state.actors.get(target_id)
            if target is None:
                logger.warning("Effect %s targets unknown actor '%s'", effect.kind, target_id)
                continue
            if not matches(target, effect.only_if):
                continue
            if effect.kind == "damage":
                self._damage(state, effect, user, target, action, hook, shared_roll)
            else:
                handler(state, effect, user, target, action, hook)

    # -----------------------
    # Shared helpers
    # -----------------------
    def _amount(self, effect: EffectDef, user: Actor, target: Actor, hook: HookContext | None) -> float:
        return resolve(
            effect.value,
            user,
            target,
            effect_kind=effect.kind,
            resource=effect.resource,
            stacks=hook.stacks if hook else 1,
            amount=hook.amount if hook else 0,
            scale=hook.scale if hook else 1,
        )

    def _taken_mult(self, target: Actor, *categories: str | None) -> float:
        return modifier_multiplier(target, self._content.statuses, categories)

    def _dealt_mult(self, user: Actor, *categories: str | None) -> float:
        return modifier_multiplier(user, self._content.statuses, categories, dealt=True)

    def _mark_defeated(self, state: BattleState, target: Actor) -> None:
        target.alive = False
        push_log(state, f"{target.name} was defeated.")

    # -----------------------
    # Damage
    # -----------------------
    def _damage(
        self,
        state: BattleState,
        effect: EffectDef,
        user: Actor,
        target: Actor,
        action: ActionContext,
        hook: HookContext | None,
        shared_roll: _AccuracyRoll | None = None,
    ) -> None:
        if not target.alive:
            return
        critical = False
        if hook is None:
            if effect.can_miss:
                roll = shared_roll.hit if shared_roll else draw_random(state)
                chance = combat_rules.hit_chance(
                    self._balance, user, target, dodge_bonus(target, self._content.statuses)
                )
                if roll >= chance:
                    push_log(state, f"{user.name}'s attack missed {target.name}.")
                    return
            if effect.can_crit:
                roll = shared_roll.crit if shared_roll else draw_random(state)
                chance = combat_rules.crit_chance(
                    self._balance, user, target, crit_chance_bonus(user, self._content.statuses)
                )
                critical = roll < chance

        element = effect.element or action.element
        element_key = element or "neutral"
        raw = self._amount(effect, user, target, hook)
        raw *= combat_rules.element_mult(self._balance, element, target)
        raw *= combat_rules.tag_resist_mult(self._balance, target)
        if critical:
            raw *= self._balance.crit_mult
        raw *= self._dealt_mult(user, element_key, "damage")
        raw *= self._taken_mult(target, element_key, "damage")
        damage = max(0, round(raw))
        if damage <= 0:
            return

        remaining, absorbed, shield_lines = absorb_damage(state, target, damage)
        if critical:
            push_log(state, "Critical hit!")
        state.log.extend(shield_lines)
        if remaining > 0 or absorbed == 0:
            target.stats.hp = max(0, target.stats.hp - remaining)
            if hook is not None:
                push_log(state, f"{target.name} suffers {remaining} damage from {hook.label}.")
            else:
                push_log(state, f"{user.name} hits {target.name} for {remaining} damage.")
        if target.stats.hp <= 0:
            self._mark_defeated(state, target)

        self.statuses.trigger_hooks(state, user, "onDealDamage", other=target, amount=damage)
        if target.alive:
            self.statuses.trigger_hooks(state, target, "onTakeDamage", other=user, amount=damage)

    # -----------------------
    # Restoration
    # -----------------------
    def _heal(
        self,
        state: BattleState,
        effect: EffectDef,
        user: Actor,
        target: Actor,
        action: ActionContext,
        hook: HookContext | None,
    ) -> None:
        amount = max(0.0, self._amount(effect, user, target, hook)) * self._taken_mult(target, "heal")
        before = target.stats.hp
        target.stats.hp = min(target.stats.max_hp, before + round(amount))
        if target.stats.hp > 0:
            target.alive = True
        healed = target.stats.hp - before
        if hook is not None:
            push_log(state, f"{target.name} recovers {healed} HP from {hook.label}.")
        else:
            push_log(state, f"{target.name} is healed for {healed} HP.")

    def _resource(
        self,
        state: BattleState,
        effect: EffectDef,
        user: Actor,
        target: Actor,
        action: ActionContext,
        hook: HookContext | None,
    ) -> None:
        resource = effect.resource or "hp"
        amount = self._amount(effect, user, target, hook)
        amount *= self._taken_mult(target, "resource", f"resource:{resource}")
        before, _ = target.stats.resource(resource)
        after = target.stats.set_resource(resource, before + round(amount))
        diff = after - before
        label = resource.upper()
        suffix = f" from {hook.label}" if hook is not None else ""
        if diff > 0:
            push_log(state, f"{target.name} gains {diff} {label}{suffix}.")
        elif diff < 0:
            push_log(state, f"{target.name} loses {-diff} {label}{suffix}.")
        else:
            push_log(state, f"{target.name}'s {label} is unchanged.")
        if resource == "hp" and after <= 0 and target.alive:
            self._mark_defeated(state, target)

    def _revive(
        self,
        state: BattleState,
        effect: EffectDef,
        user: Actor,
        target: Actor,
        action: ActionContext,
        hook: HookContext | None,
    ) -> None:
        if target.alive:
            logger.debug("Revive skipped: %s is alive", target.id)
            return
        amount = round(self._amount(effect, user, target, hook))
        target.stats.hp = max(1, min(target.stats.max_hp, amount))
        target.alive = True
        push_log(state, f"{target.name} was revived with {target.stats.hp} HP.")

    # -----------------------
    # Statuses
    # -----------------------
    def _apply_status(
        self,
        state: BattleState,
        effect: EffectDef,
        user: Actor,
        target: Actor,
        action: ActionContext,
        hook: HookContext | None,
    ) -> None:
        if not effect.status_id:
            logger.debug("applyStatus effect without a status id")
            return
        self.statuses.apply_status(state, target.id, effect.status_id, effect.status_turns, source_id=user.id)

    def _cleanse(
        self,
        state: BattleState,
        effect: EffectDef,
        user: Actor,
        target: Actor,
        action: ActionContext,
        hook: HookContext | None,
    ) -> None:
        removed = self.statuses.cleanse(state, target, effect.cleanse_tags)
        if removed:
            push_log(state, f"{target.name} was cleansed of {', '.join(removed)}.")
        else:
            push_log(state, f"{target.name} had nothing to cleanse.")

    def _dispel(
        self,
        state: BattleState,
        effect: EffectDef,
        user: Actor,
        target: Actor,
        action: ActionContext,
        hook: HookContext | None,
    ) -> None:
        removed = self.statuses.dispel(state, target, effect.status_id)
        if removed:
            push_log(state, f"{', '.join(removed)} dispelled from {target.name}.")
        else:
            push_log(state, f"{target.name} had nothing to dispel.")

    # -----------------------
    # Battle modifiers
    # -----------------------
    def _modify_stat(
        self,
        state: BattleState,
        effect: EffectDef,
        user: Actor,
        target: Actor,
        action: ActionContext,
        hook: HookContext | None,
    ) -> None:
        spec = _MODIFIABLE_STATS.get(effect.stat or "")
        if spec is None:
            logger.debug("modifyStat with unknown stat '%s'", effect.stat)
            return
        attr, current_attr, floor = spec
        delta = round(self._amount(effect, user, target, hook))
        before = getattr(target.stats, attr)
        after = max(floor, before + delta)
        setattr(target.stats, attr, after)
        if current_attr is not None:
            setattr(target.stats, current_attr, min(getattr(target.stats, current_attr), after))
        change = after - before
        if change >= 0:
            push_log(state, f"{target.name}'s {effect.stat} rose by {change}.")
        else:
            push_log(state, f"{target.name}'s {effect.stat} fell by {-change}.")

    def _shield(
        self,
        state: BattleState,
        effect: EffectDef,
        user: Actor,
        target: Actor,
        action: ActionContext,
        hook: HookContext | None,
    ) -> None:
        shield_id = effect.shield_id or "shield"
        total = grant_shield(state, target.id, shield_id, self._amount(effect, user, target, hook), effect.element)
        push_log(state, f"{target.name} is protected by {shield_id} ({total} HP).")

    def _taunt(
        self,
        state: BattleState,
        effect: EffectDef,
        user: Actor,
        target: Actor,
        action: ActionContext,
        hook: HookContext | None,
    ) -> None:
        turns = 1 if effect.status_turns is None else effect.status_turns
        if turns <= 0:
            state.taunts.pop(target.id, None)
            return
        state.taunts[target.id] = TauntState(source_id=user.id, turns=turns)
        push_log(state, f"{target.name} is taunted by {user.name} for {turns} turns.")

    def _prevent_action(
        self,
        state: BattleState,
        effect: EffectDef,
        user: Actor,
        target: Actor,
        action: ActionContext,
        hook: HookContext | None,
    ) -> None:
        state.prevented[target.id] = effect.message
        push_log(state, f"{target.name} will be unable to act.")

    # -----------------------
    # Battle-wide effects
    # -----------------------
    def _apply_once(
        self,
        state: BattleState,
        effect: EffectDef,
        user: Actor,
        action: ActionContext,
        hook: HookContext | None,
    ) -> None:
        if effect.kind == "flee":
            state.ended = BattleEnd(reason="fled")
            push_log(state, f"{user.name} fled the battle!")
        elif effect.kind == "summon":
            self._summon(state, effect, user)
        else:
            self._change_inventory(state, effect, user, hook)

    def _summon(self, state: BattleState, effect: EffectDef, user: Actor) -> None:
        enemy_def = self._content.enemies.get(effect.summon_id or "")
        if enemy_def is None:
            logger.warning("Summon references unknown enemy '%s'", effect.summon_id)
            return
        instance_id = make_instance_id(enemy_def.id, state.actors)
        summoned = create_enemy_actor(enemy_def, user.stats.lv, instance_id)
        summoned.tags.append("summon")
        state.actors[instance_id] = summoned
        if user.id in state.side_enemy:
            state.side_enemy.append(instance_id)
        else:
            state.side_player.append(instance_id)
        state.order.append(instance_id)
        push_log(state, f"{user.name} summoned {summoned.name}!")

    def _change_inventory(self, state: BattleState, effect: EffectDef, user: Actor, hook: HookContext | None) -> None:
        if not effect.item_id:
            logger.debug("%s effect without an item id", effect.kind)
            return
        item_def = self._content.items.get(effect.item_id)
        name = item_def.name if item_def else effect.item_id
        quantity = max(1, round(self._amount(effect, user, user, hook)))
        if effect.kind == "giveItem":
            add_item(state, effect.item_id, quantity)
            push_log(state, f"{quantity}x {name} added to the inventory.")
            return
        taken = take_up_to(state, effect.item_id, quantity)
        if taken:
            push_log(state, f"{taken}x {name} removed from the inventory.")
        else:
            push_log(state, f"No {name} to remove from the inventory.")
