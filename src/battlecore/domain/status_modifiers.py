"""Aggregated passive modifiers from an actor's active statuses."""
from __future__ import annotations

from typing import Dict, Iterable, Mapping

from battlecore.domain.defs import StatusTemplate
from battlecore.domain.entities import Actor, StatusInstance


def _templates(actor: Actor, statuses: Mapping[str, StatusTemplate]) -> Iterable[tuple[StatusInstance, StatusTemplate]]:
    for entry in actor.statuses:
        template = statuses.get(entry.status_id)
        if template is not None:
            yield entry, template


def modifier_multiplier(
    actor: Actor,
    statuses: Mapping[str, StatusTemplate],
    categories: Iterable[str | None],
    *,
    dealt: bool = False,
) -> float:
    """
    Return ``1 + sum(pct)`` over the ``all`` bucket and the given categories.

    Percentages are fractions (``0.25`` is +25%) and scale with stacks. The
    multiplier never drops below zero.
    """

    keys = ["all"]
    for category in categories:
        if category and category not in keys:
            keys.append(category)
    total = 0.0
    for entry, template in _templates(actor, statuses):
        table = template.modifiers.damage_dealt_pct if dealt else template.modifiers.damage_taken_pct
        for key in keys:
            total += table.get(key, 0.0) * entry.stacks
    return max(0.0, 1.0 + total)


def dodge_bonus(actor: Actor, statuses: Mapping[str, StatusTemplate]) -> float:
    return sum(template.modifiers.dodge_bonus * entry.stacks for entry, template in _templates(actor, statuses))


def crit_chance_bonus(actor: Actor, statuses: Mapping[str, StatusTemplate]) -> float:
    return sum(
        template.modifiers.crit_chance_bonus * entry.stacks for entry, template in _templates(actor, statuses)
    )


def resource_regen(actor: Actor, statuses: Mapping[str, StatusTemplate]) -> Dict[str, int]:
    regen: Dict[str, int] = {}
    for entry, template in _templates(actor, statuses):
        for resource, amount in template.modifiers.resource_regen_per_turn.items():
            regen[resource] = regen.get(resource, 0) + amount * entry.stacks
    return {resource: amount for resource, amount in regen.items() if amount}


def sync_stat_deltas(actor: Actor, entry: StatusInstance, template: StatusTemplate | None) -> None:
    """
    Bring the atk/def deltas applied by ``entry`` in line with its stacks.

    Passing ``template=None`` reverts whatever the instance applied, which is
    how removal undoes a status's stat changes.
    """

    target_atk = template.modifiers.atk * entry.stacks if template else 0
    target_def = template.modifiers.defense * entry.stacks if template else 0

    new_atk = max(0, actor.stats.atk - entry.applied_atk + target_atk)
    entry.applied_atk = new_atk - (actor.stats.atk - entry.applied_atk)
    actor.stats.atk = new_atk

    new_def = max(0, actor.stats.defense - entry.applied_def + target_def)
    entry.applied_def = new_def - (actor.stats.defense - entry.applied_def)
    actor.stats.defense = new_def
