"""Enemies repository."""
from __future__ import annotations

from typing import Dict

from battlecore.data.repositories.base import RepositoryBase
from battlecore.domain.defs import EnemyDef, StatBlock

from .parsing import (
    assert_required,
    optional,
    parse_drops,
    parse_stat_block,
    require_str,
    require_str_list,
)


class EnemiesRepository(RepositoryBase[EnemyDef]):
    """Loads and validates enemy definitions."""

    def __init__(self, base_path=None) -> None:
        super().__init__("enemies.json", base_path)

    def _build(self, raw: dict[str, object]) -> Dict[str, EnemyDef]:
        enemies: Dict[str, EnemyDef] = {}
        for raw_id, enemy_data, context in self._entries(raw, "enemy"):
            assert_required(enemy_data, {"name", "base"}, context)
            enemies[raw_id] = EnemyDef(
                id=raw_id,
                name=require_str(enemy_data["name"], f"{context}.name"),
                base=parse_stat_block(enemy_data["base"], f"{context}.base"),
                scale=optional(
                    enemy_data,
                    "scale",
                    lambda value, ctx: parse_stat_block(value, ctx, default_max_hp=0),
                    context,
                    StatBlock(max_hp=0),
                ),
                skills=tuple(optional(enemy_data, "skills", require_str_list, context, [])),
                drops=optional(enemy_data, "items", parse_drops, context, ()),
                tags=tuple(optional(enemy_data, "tags", require_str_list, context, [])),
            )
        return enemies
