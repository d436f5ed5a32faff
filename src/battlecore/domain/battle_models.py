"""Battle domain models."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Sequence

from battlecore.core.rng import draw_index, next_draw
from battlecore.core.types import EndReason
from battlecore.domain.entities import Actor


@dataclass(slots=True)
class InventoryEntry:
    item_id: str
    qty: int


@dataclass(slots=True)
class ShieldState:
    """Damage-absorbing buffer held by an actor."""

    id: str
    hp: int
    element: str | None = None


@dataclass(slots=True)
class TauntState:
    source_id: str
    turns: int


@dataclass(slots=True)
class ChargeState:
    remaining: int
    max: int


@dataclass(slots=True)
class BattleEnd:
    reason: EndReason


@dataclass(slots=True)
class UseResult:
    """Outcome of an action attempt."""

    ok: bool
    reason: str | None = None
    log: List[str] = field(default_factory=list)


@dataclass(slots=True)
class BattleState:
    """Tracks the state of an ongoing battle."""

    actors: Dict[str, Actor]
    side_player: List[str]
    side_enemy: List[str]
    rng_seed: int
    order: List[str] = field(default_factory=list)
    current: int = 0
    turn: int = 1
    inventory: List[InventoryEntry] = field(default_factory=list)
    log: List[str] = field(default_factory=list)
    cooldowns: Dict[str, Dict[str, int]] = field(default_factory=dict)
    charges: Dict[str, Dict[str, ChargeState]] = field(default_factory=dict)
    shields: Dict[str, Dict[str, ShieldState]] = field(default_factory=dict)
    taunts: Dict[str, TauntState] = field(default_factory=dict)
    # actor id -> optional message logged when the skipped turn begins
    prevented: Dict[str, str | None] = field(default_factory=dict)
    ended: BattleEnd | None = None

    @property
    def is_over(self) -> bool:
        return self.ended is not None

    @property
    def current_actor_id(self) -> str | None:
        if not self.order:
            return None
        return self.order[self.current % len(self.order)]


def create_battle_state(
    players: Sequence[Actor],
    enemies: Sequence[Actor],
    *,
    seed: int,
    inventory: Iterable[InventoryEntry] = (),
    order: Sequence[str] | None = None,
) -> BattleState:
    """Build a fresh battle; turn order defaults to players then enemies."""
    actors: Dict[str, Actor] = {}
    for actor in (*players, *enemies):
        if actor.id in actors:
            raise ValueError(f"Duplicate actor id '{actor.id}' in battle roster.")
        actors[actor.id] = actor
    side_player = [actor.id for actor in players]
    side_enemy = [actor.id for actor in enemies]
    turn_order = list(order) if order else [*side_player, *side_enemy]
    return BattleState(
        actors=actors,
        side_player=side_player,
        side_enemy=side_enemy,
        rng_seed=seed,
        order=turn_order,
        inventory=[InventoryEntry(item_id=entry.item_id, qty=entry.qty) for entry in inventory],
    )


def draw_random(state: BattleState) -> float:
    """Consume one draw from the battle RNG."""
    state.rng_seed, value = next_draw(state.rng_seed)
    return value


def draw_random_index(state: BattleState, size: int) -> int:
    """Consume one draw from the battle RNG and map it onto ``range(size)``."""
    state.rng_seed, index = draw_index(state.rng_seed, size)
    return index


def get_actor(state: BattleState, actor_id: str | None) -> Actor | None:
    if actor_id is None:
        return None
    return state.actors.get(actor_id)


def is_player_side(state: BattleState, actor_id: str) -> bool:
    return actor_id in state.side_player


def allies_of(state: BattleState, actor_id: str) -> List[str]:
    """Roster ids on the same side as ``actor_id`` (including the actor)."""
    if actor_id in state.side_enemy:
        return list(state.side_enemy)
    return list(state.side_player)


def opponents_of(state: BattleState, actor_id: str) -> List[str]:
    if actor_id in state.side_enemy:
        return list(state.side_player)
    return list(state.side_enemy)


def push_log(state: BattleState, message: str) -> None:
    state.log.append(message)
