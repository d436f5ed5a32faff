"""Factory for creating player actors from class definitions."""
from __future__ import annotations

from typing import Mapping

from battlecore.domain.defs import ClassDef
from battlecore.domain.enemy_scaling import scale_stats
from battlecore.domain.entities import Actor, ActorMeta
from battlecore.services.errors import FactoryError

PLAYER_TAG = "player"


def create_player_actor(class_def: ClassDef, name: str, actor_id: str = "hero", level: int = 1) -> Actor:
    """Instantiate a player from a class preset. Class stats do not grow with level."""
    stats = scale_stats(class_def.base, None, level=level)
    return Actor(
        id=actor_id,
        name=name,
        stats=stats,
        tags=[PLAYER_TAG],
        clazz=class_def.id,
        meta=ActorMeta(skill_ids=tuple(class_def.skills), source_id=class_def.id),
    )


def create_player_from_class_id(
    class_id: str,
    name: str,
    classes: Mapping[str, ClassDef],
    actor_id: str = "hero",
    level: int = 1,
) -> Actor:
    """Instantiate a player using the provided class definitions."""
    try:
        class_def = classes[class_id]
    except KeyError as exc:
        raise FactoryError(f"Class '{class_id}' not found.") from exc
    return create_player_actor(class_def, name, actor_id, level)
