"""Factory helpers for runtime actors."""

from .enemy_factory import create_enemy_actor, create_enemy_from_id
from .id_factory import make_instance_id
from .player_factory import create_player_actor, create_player_from_class_id

__all__ = [
    "create_enemy_actor",
    "create_enemy_from_id",
    "create_player_actor",
    "create_player_from_class_id",
    "make_instance_id",
]
