"""Status lifecycle: application, stacking, ticking, removal and hooks."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, List, Sequence, Set, Tuple

from battlecore.domain.battle_models import BattleState, push_log
from battlecore.domain.content import ContentBundle
from battlecore.domain.defs import StatusTemplate
from battlecore.domain.entities import Actor, StatusInstance
from battlecore.domain.shields import grant_shield, remove_shield
from battlecore.domain.status_modifiers import resource_regen, sync_stat_deltas
from battlecore.domain.targeting import resolve_targets

if TYPE_CHECKING:
    from battlecore.services.effect_service import EffectExecutor

logger = logging.getLogger(__name__)

# Hooks whose effects are attributed to whoever applied the status.
_SOURCE_ATTRIBUTED_HOOKS = ("onTurnStart", "onTurnEnd", "onApply", "onExpire")


@dataclass(slots=True)
class HookContext:
    """Describes where a hook-originated effect came from."""

    label: str
    stacks: int = 1
    amount: float = 0
    scale: float = 1


class StatusEngine:
    """Applies and ticks statuses, running their hook effects through the executor."""

    def __init__(self, content: ContentBundle, executor: EffectExecutor) -> None:
        self._statuses = content.statuses
        self._executor = executor
        self._running_hooks: Set[Tuple[str, str, str]] = set()

    def template(self, status_id: str) -> StatusTemplate | None:
        return self._statuses.get(status_id)

    # -----------------------
    # Application
    # -----------------------
    def apply_status(
        self,
        state: BattleState,
        target_id: str,
        status_id: str,
        turns: int | None = None,
        *,
        source_id: str | None = None,
        stacks: int = 1,
    ) -> bool:
        """Apply or re-apply a status following its stack rule. Returns False when nothing changed."""
        target = state.actors.get(target_id)
        if target is None:
            logger.warning("Cannot apply status %s to missing actor %s", status_id, target_id)
            return False
        template = self._statuses.get(status_id)
        if template is None:
            logger.debug("Unknown status id '%s'", status_id)
            push_log(state, f"Status {status_id} is not defined.")
            return False

        duration = self._resolve_duration(turns, template)
        if duration <= 0:
            push_log(state, f"{template.name} had no effect on {target.name}.")
            return False

        stacks_to_add = max(1, stacks)
        existing = target.find_status(status_id)
        if existing is not None:
            if template.stack_rule == "ignore":
                push_log(state, f"{template.name} is already affecting {target.name}.")
                return False
            if template.stack_rule in ("stackCount", "stackMagnitude"):
                existing.stacks = self._clamp_stacks(existing.stacks + stacks_to_add, template)
            else:
                existing.stacks = self._clamp_stacks(stacks_to_add, template)
            existing.turns = duration
            if source_id:
                existing.source_id = source_id
            self._sync(state, target, existing, template)
            push_log(state, f"{target.name}'s {template.name} was refreshed ({existing.turns} turns).")
            self._run_hook(state, target, template, existing, "onApply")
            return True

        entry = StatusInstance(
            status_id=status_id,
            turns=duration,
            stacks=self._clamp_stacks(stacks_to_add, template),
            source_id=source_id,
        )
        target.statuses.append(entry)
        self._sync(state, target, entry, template)
        push_log(state, f"{target.name} is afflicted by {template.name} for {duration} turns.")
        self._run_hook(state, target, template, entry, "onApply")
        return True

    # -----------------------
    # Turn boundaries
    # -----------------------
    def tick_start_of_turn(self, state: BattleState, actor_id: str) -> None:
        actor = state.actors.get(actor_id)
        if actor is None or not actor.alive:
            return
        self.trigger_hooks(state, actor, "onTurnStart")

    def tick_end_of_turn(self, state: BattleState, actor_id: str) -> None:
        """
        Fire onTurnEnd, count every status down and expire finished ones.

        Regeneration is read before expiry so a status still regenerates on
        its final turn. The actor's taunt counter ticks last.
        """

        actor = state.actors.get(actor_id)
        if actor is None:
            return
        regen = resource_regen(actor, self._statuses)

        for entry in list(actor.statuses):
            template = self._statuses.get(entry.status_id)
            if template is None:
                continue
            self._run_hook(state, actor, template, entry, "onTurnEnd")
            if entry not in actor.statuses:
                continue
            entry.turns -= 1
            if entry.turns <= 0:
                actor.statuses.remove(entry)
                push_log(state, f"{template.name} expired on {actor.name}.")
                self._expire(state, actor, template, entry)

        for resource, amount in regen.items():
            current, _ = actor.stats.resource(resource)
            actor.stats.set_resource(resource, current + amount)
        self._tick_taunt(state, actor)

    def _tick_taunt(self, state: BattleState, actor: Actor) -> None:
        taunt = state.taunts.get(actor.id)
        if taunt is None:
            return
        taunt.turns -= 1
        if taunt.turns <= 0:
            del state.taunts[actor.id]
            push_log(state, f"{actor.name} is no longer taunted.")

    # -----------------------
    # Removal
    # -----------------------
    def cleanse(self, state: BattleState, actor: Actor, tags: Sequence[str] | None = None) -> List[str]:
        """Remove statuses sharing a tag with ``tags`` (all of them when no tags are given)."""
        wanted = set(tags or ())

        def selected(template: StatusTemplate) -> bool:
            return not wanted or bool(wanted.intersection(template.tags))

        return self._remove_where(state, actor, selected)

    def dispel(self, state: BattleState, actor: Actor, status_id: str | None = None) -> List[str]:
        """Remove statuses regardless of tags; only ``status_id`` when given."""
        return self._remove_where(state, actor, lambda template: status_id is None or template.id == status_id)

    def _remove_where(
        self, state: BattleState, actor: Actor, selected: Callable[[StatusTemplate], bool]
    ) -> List[str]:
        removed: List[Tuple[StatusInstance, StatusTemplate]] = []
        kept: List[StatusInstance] = []
        for entry in actor.statuses:
            template = self._statuses.get(entry.status_id)
            if template is not None and selected(template):
                removed.append((entry, template))
            else:
                kept.append(entry)
        actor.statuses[:] = kept
        for entry, template in removed:
            self._expire(state, actor, template, entry)
        return [template.name for _, template in removed]

    def _expire(self, state: BattleState, actor: Actor, template: StatusTemplate, entry: StatusInstance) -> None:
        sync_stat_deltas(actor, entry, None)
        self._clear_shield(state, actor, template)
        self._run_hook(state, actor, template, entry, "onExpire")

    # -----------------------
    # Hooks
    # -----------------------
    def trigger_hooks(
        self,
        state: BattleState,
        actor: Actor,
        hook: str,
        *,
        other: Actor | None = None,
        amount: float = 0,
    ) -> None:
        """Fire ``hook`` for every active status on ``actor``."""
        for entry in list(actor.statuses):
            if state.ended is not None:
                return
            if entry not in actor.statuses:
                continue
            template = self._statuses.get(entry.status_id)
            if template is None:
                continue
            self._run_hook(state, actor, template, entry, hook, other=other, amount=amount)

    def _run_hook(
        self,
        state: BattleState,
        owner: Actor,
        template: StatusTemplate,
        entry: StatusInstance,
        hook: str,
        *,
        other: Actor | None = None,
        amount: float = 0,
    ) -> None:
        effects = template.hooks.get(hook)
        if not effects:
            return
        key = (owner.id, template.id, hook)
        if key in self._running_hooks:
            logger.debug("Skipping re-entrant %s hook of %s on %s", hook, template.id, owner.id)
            return

        status_source = state.actors.get(entry.source_id) if entry.source_id else None
        if hook in _SOURCE_ATTRIBUTED_HOOKS:
            source = status_source or owner
        else:
            source = owner
        if hook == "onTakeDamage":
            target = other or status_source or owner
        else:
            target = owner

        context = HookContext(
            label=template.name,
            stacks=entry.stacks,
            amount=amount,
            scale=entry.stacks if template.stack_rule == "stackMagnitude" else 1,
        )
        self._running_hooks.add(key)
        try:
            for effect in effects:
                if state.ended is not None:
                    break
                if effect.selector is not None:
                    target_ids = resolve_targets(state, effect.selector, owner.id)
                else:
                    target_ids = [target.id]
                self._executor.apply_effect(state, effect, source.id, target_ids, hook=context)
        finally:
            self._running_hooks.discard(key)

    # -----------------------
    # Helpers
    # -----------------------
    def _sync(self, state: BattleState, actor: Actor, entry: StatusInstance, template: StatusTemplate) -> None:
        sync_stat_deltas(actor, entry, template)
        shield = template.modifiers.shield
        if shield is not None:
            grant_shield(state, actor.id, shield.id, shield.hp * entry.stacks, shield.element, replace=True)

    @staticmethod
    def _clear_shield(state: BattleState, actor: Actor, template: StatusTemplate) -> None:
        shield = template.modifiers.shield
        remove_shield(state, actor.id, shield.id if shield else template.id)

    @staticmethod
    def _resolve_duration(turns: int | None, template: StatusTemplate) -> int:
        if turns is not None and turns > 0:
            return turns
        if template.duration_turns is None:
            return 0
        return max(0, template.duration_turns)

    @staticmethod
    def _clamp_stacks(value: int, template: StatusTemplate) -> int:
        if template.max_stacks is None:
            return max(1, value)
        return max(1, min(template.max_stacks, value))
