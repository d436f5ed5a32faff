"""Load every definition file into one cross-checked content bundle."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Mapping

from battlecore.data.errors import DataReferenceError
from battlecore.data.repositories import (
    BalanceRepository,
    ClassesRepository,
    EnemiesRepository,
    ItemsRepository,
    SkillsRepository,
    StatusesRepository,
)
from battlecore.domain.content import ContentBundle
from battlecore.domain.defs import ActionDef, EffectDef
from battlecore.domain.defs.status_def import HOOK_ATTRS

logger = logging.getLogger(__name__)


def load_content(base_path: Path | str | None = None) -> ContentBundle:
    """
    Read balance, skills, items, statuses, enemies and classes from ``base_path``.

    Without a path the definitions directory is resolved the same way as
    :func:`battlecore.data.paths.get_definitions_path`. Raises ``DataLoadError``
    for unreadable files, ``DataValidationError`` for malformed entries and
    ``DataReferenceError`` when one definition names an id nothing provides.
    """

    content = ContentBundle(
        balance=BalanceRepository(base_path).load(),
        skills=SkillsRepository(base_path).as_dict(),
        items=ItemsRepository(base_path).as_dict(),
        statuses=StatusesRepository(base_path).as_dict(),
        enemies=EnemiesRepository(base_path).as_dict(),
        classes=ClassesRepository(base_path).as_dict(),
    )
    validate_references(content)
    logger.debug(
        "Loaded content: %d skills, %d items, %d statuses, %d enemies, %d classes",
        len(content.skills),
        len(content.items),
        len(content.statuses),
        len(content.enemies),
        len(content.classes),
    )
    return content


def validate_references(content: ContentBundle) -> None:
    """Ensure every id named inside the bundle resolves to a definition."""
    for skill in content.skills.values():
        _check_action(content, skill, f"skill '{skill.id}'")
    for item in content.items.values():
        _check_action(content, item, f"item '{item.id}'")

    for status in content.statuses.values():
        for hook, attr in HOOK_ATTRS.items():
            _check_effects(content, getattr(status.hooks, attr), f"status '{status.id}'.hooks.{hook}")

    for enemy in content.enemies.values():
        context = f"enemy '{enemy.id}'"
        _check_ids(enemy.skills, content.skills, "skill", context)
        _check_ids((drop.item_id for drop in enemy.drops), content.items, "item", context)

    for class_def in content.classes.values():
        context = f"class '{class_def.id}'"
        _check_ids(class_def.skills, content.skills, "skill", context)
        _check_ids((drop.item_id for drop in class_def.start_items), content.items, "item", context)


def _check_action(content: ContentBundle, action: ActionDef, context: str) -> None:
    if action.costs.item is not None:
        _check_ids((action.costs.item.item_id,), content.items, "item", f"{context}.costs")
    _check_effects(content, action.effects, context)


def _check_effects(content: ContentBundle, effects: Iterable[EffectDef], context: str) -> None:
    for index, effect in enumerate(effects):
        effect_context = f"{context}.effects[{index}]"
        if effect.kind == "applyStatus" or (effect.kind == "dispel" and effect.status_id):
            _check_ids((effect.status_id or "",), content.statuses, "status", effect_context)
        elif effect.kind == "summon":
            _check_ids((effect.summon_id or "",), content.enemies, "enemy", effect_context)
        elif effect.kind in ("giveItem", "removeItem"):
            _check_ids((effect.item_id or "",), content.items, "item", effect_context)


def _check_ids(ids: Iterable[str], known: Mapping[str, object], kind: str, context: str) -> None:
    for def_id in ids:
        if def_id not in known:
            raise DataReferenceError(f"{context} references unknown {kind} '{def_id}'.")
