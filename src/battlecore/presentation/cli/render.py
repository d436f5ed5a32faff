"""Shared CLI rendering helpers."""
from __future__ import annotations

import os
from typing import Iterable, List

from battlecore.domain.battle_models import BattleState
from battlecore.domain.entities import Actor

DEBUG_ENV_VAR = "BATTLECORE_DEBUG"


def debug_enabled() -> bool:
    """Return True only when BATTLECORE_DEBUG is explicitly set to '1'."""
    return os.getenv(DEBUG_ENV_VAR) == "1"


def format_actor_line(actor: Actor) -> str:
    if not actor.alive:
        return f"{actor.name} [{actor.id}]: DOWN"
    stats = actor.stats
    line = f"{actor.name} [{actor.id}]: HP {stats.hp}/{stats.max_hp} STA {stats.sta}/{stats.max_sta} MP {stats.mp}/{stats.max_mp}"
    if actor.statuses:
        line += " (" + ", ".join(entry.status_id for entry in actor.statuses) + ")"
    return line


def render_roster(state: BattleState) -> List[str]:
    """Both sides, players first, one line per actor."""
    lines = ["-- Party --"]
    lines.extend(format_actor_line(state.actors[actor_id]) for actor_id in state.side_player)
    lines.append("-- Enemies --")
    lines.extend(format_actor_line(state.actors[actor_id]) for actor_id in state.side_enemy)
    return lines


def render_log(lines: Iterable[str]) -> List[str]:
    # "Turn N" markers become section breaks
    rendered: List[str] = []
    for line in lines:
        if line.startswith("Turn "):
            rendered.append("")
            rendered.append(f"== {line} ==")
        else:
            rendered.append(f"  {line}")
    return rendered
