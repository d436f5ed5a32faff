"""Target selection over battle rosters."""
from __future__ import annotations

import logging
from typing import List, Sequence

from battlecore.domain.battle_models import BattleState, allies_of, draw_random_index, opponents_of
from battlecore.domain.defs import TargetSelector
from battlecore.domain.entities import Actor
from battlecore.domain.filters import matches, metric_value

logger = logging.getLogger(__name__)

_TAUNTABLE_SIDES = ("enemy", "any")


def _is_selectable(actor: Actor | None, include_dead: bool) -> bool:
    if actor is None:
        return False
    return include_dead or actor.alive


def candidate_pool(state: BattleState, side: str, acting_id: str, include_dead: bool = False) -> List[str]:
    """Return the ordered candidate ids for ``side`` as seen from ``acting_id``."""
    if side == "self":
        ids = [acting_id]
    elif side == "ally":
        ids = allies_of(state, acting_id)
    elif side == "enemy":
        ids = opponents_of(state, acting_id)
    elif side == "any":
        others = [actor_id for actor_id in allies_of(state, acting_id) if actor_id != acting_id]
        ids = [acting_id, *others, *opponents_of(state, acting_id)]
    else:
        logger.debug("Unknown selector side '%s'", side)
        return []
    return [actor_id for actor_id in ids if _is_selectable(state.actors.get(actor_id), include_dead)]


def _forced_by_taunt(state: BattleState, selector: TargetSelector, acting_id: str) -> List[str] | None:
    taunt = state.taunts.get(acting_id)
    if taunt is None or selector.side not in _TAUNTABLE_SIDES:
        return None
    source = state.actors.get(taunt.source_id)
    if source is None or not source.alive:
        logger.debug("Clearing stale taunt on %s (source %s)", acting_id, taunt.source_id)
        del state.taunts[acting_id]
        return None
    return [taunt.source_id]


def _sort_key_metric(actor: Actor, of_what: str | None) -> float:
    value = metric_value(actor, of_what or "hpPct")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    return float(value)


def _pick_random(state: BattleState, pool: Sequence[str], count: int) -> List[str]:
    remaining = list(pool)
    picked: List[str] = []
    while remaining and len(picked) < count:
        index = draw_random_index(state, len(remaining))
        picked.append(remaining.pop(index))
    return picked


def resolve_targets(
    state: BattleState,
    selector: TargetSelector,
    acting_id: str,
    explicit_ids: Sequence[str] | None = None,
) -> List[str]:
    """
    Resolve a selector into an ordered list of actor ids.

    A live taunt on the acting actor forces enemy-facing selectors onto the
    taunt source. Random picks draw from the battle RNG once per target;
    every other mode is deterministic. An empty result means no valid target.
    """

    forced = _forced_by_taunt(state, selector, acting_id)
    if forced is not None:
        return forced

    pool = candidate_pool(state, selector.side, acting_id, selector.include_dead)
    if not pool:
        return []

    mode = selector.mode
    count = selector.count if selector.count is not None and selector.count > 0 else None

    if mode in ("self", "single"):
        if explicit_ids:
            for explicit_id in explicit_ids:
                if explicit_id in pool:
                    return [explicit_id]
            return []
        return [pool[0]]
    if mode == "all":
        return pool
    if mode == "random":
        return _pick_random(state, pool, count or 1)
    if mode in ("lowest", "highest"):
        ranked = sorted(
            range(len(pool)),
            key=lambda index: _sort_key_metric(state.actors[pool[index]], selector.of_what),
            reverse=mode == "highest",
        )
        # ties keep roster order in both directions
        return [pool[index] for index in ranked[: count or 1]]
    if mode == "condition":
        kept = [actor_id for actor_id in pool if matches(state.actors[actor_id], selector.condition)]
        return kept if count is None else kept[:count]

    logger.debug("Unknown selector mode '%s'", mode)
    return []


__all__ = ["candidate_pool", "resolve_targets"]
