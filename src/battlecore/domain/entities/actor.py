"""Battle participant models."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple

from .stats import Stats


@dataclass(slots=True)
class StatusInstance:
    """An active status on an actor."""

    status_id: str
    turns: int
    stacks: int = 1
    source_id: str | None = None
    # atk/def deltas currently applied to the owner's stats by this instance
    applied_atk: int = 0
    applied_def: int = 0


@dataclass(slots=True)
class ItemDrop:
    item_id: str
    qty: int


@dataclass(slots=True)
class ActorMeta:
    """Definition-level data carried by spawned actors."""

    skill_ids: Tuple[str, ...] = ()
    item_drops: Tuple[ItemDrop, ...] = ()
    source_id: str | None = None  # originating enemy/class definition id


@dataclass(slots=True)
class Actor:
    """Represents an individual participant in battle."""

    id: str
    name: str
    stats: Stats
    statuses: List[StatusInstance] = field(default_factory=list)
    alive: bool = True
    tags: List[str] = field(default_factory=list)
    clazz: str | None = None
    meta: ActorMeta | None = None

    def status_ids(self) -> List[str]:
        return [entry.status_id for entry in self.statuses]

    def find_status(self, status_id: str) -> StatusInstance | None:
        for entry in self.statuses:
            if entry.status_id == status_id:
                return entry
        return None
