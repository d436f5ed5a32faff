"""Factory for creating enemy actors from definitions."""
from __future__ import annotations

from typing import Mapping

from battlecore.domain.defs import EnemyDef
from battlecore.domain.enemy_scaling import scale_stats
from battlecore.domain.entities import Actor, ActorMeta, ItemDrop
from battlecore.services.errors import FactoryError


def create_enemy_actor(enemy_def: EnemyDef, level: int, instance_id: str | None = None) -> Actor:
    """Instantiate an enemy at ``level`` with stats ``base + scale * level``."""
    stats = scale_stats(enemy_def.base, enemy_def.scale, level=level)
    return Actor(
        id=instance_id or enemy_def.id,
        name=enemy_def.name,
        stats=stats,
        tags=list(enemy_def.tags),
        meta=ActorMeta(
            skill_ids=tuple(enemy_def.skills),
            item_drops=tuple(ItemDrop(item_id=drop.item_id, qty=drop.qty) for drop in enemy_def.drops),
            source_id=enemy_def.id,
        ),
    )


def create_enemy_from_id(
    enemy_id: str,
    enemies: Mapping[str, EnemyDef],
    level: int,
    instance_id: str | None = None,
) -> Actor:
    """Instantiate an enemy by id using the provided definitions."""
    try:
        enemy_def = enemies[enemy_id]
    except KeyError as exc:
        raise FactoryError(f"Enemy '{enemy_id}' not found.") from exc
    return create_enemy_actor(enemy_def, level, instance_id)
