"""Statuses repository."""
from __future__ import annotations

from typing import Dict

from battlecore.core.types import RESOURCES, STACK_RULES
from battlecore.data.errors import DataValidationError
from battlecore.data.repositories.base import RepositoryBase
from battlecore.domain.defs import ShieldSpec, StatusHooks, StatusModifiers, StatusTemplate
from battlecore.domain.defs.status_def import HOOK_ATTRS

from .parsing import (
    assert_required,
    optional,
    parse_effects,
    require_int,
    require_literal,
    require_mapping,
    require_number,
    require_number_map,
    require_str,
    require_str_list,
)


class StatusesRepository(RepositoryBase[StatusTemplate]):
    """Loads status templates with their modifiers and lifecycle hooks."""

    def __init__(self, base_path=None) -> None:
        super().__init__("statuses.json", base_path)

    def _build(self, raw: dict[str, object]) -> Dict[str, StatusTemplate]:
        statuses: Dict[str, StatusTemplate] = {}
        for raw_id, status_data, context in self._entries(raw, "status"):
            assert_required(status_data, {"name"}, context)
            max_stacks = optional(status_data, "maxStacks", require_int, context)
            if max_stacks is not None and max_stacks < 1:
                raise DataValidationError(f"{context}.maxStacks must be at least 1.")
            statuses[raw_id] = StatusTemplate(
                id=raw_id,
                name=require_str(status_data["name"], f"{context}.name"),
                description=optional(status_data, "desc", require_str, context, ""),
                tags=tuple(optional(status_data, "tags", require_str_list, context, [])),
                max_stacks=max_stacks,
                stack_rule=require_literal(status_data.get("stackRule", "renew"), STACK_RULES, f"{context}.stackRule"),
                duration_turns=optional(status_data, "durationTurns", require_int, context),
                modifiers=self._parse_modifiers(status_data.get("modifiers"), raw_id, f"{context}.modifiers"),
                hooks=optional(status_data, "hooks", self._parse_hooks, context, StatusHooks()),
            )
        return statuses

    @staticmethod
    def _parse_modifiers(value: object, status_id: str, context: str) -> StatusModifiers:
        if value is None:
            return StatusModifiers()
        data = require_mapping(value, context)
        regen = optional(data, "resourceRegenPerTurn", require_number_map, context, {})
        for resource in regen:
            if resource not in RESOURCES:
                raise DataValidationError(f"{context}.resourceRegenPerTurn has unknown resource '{resource}'.")
        shield = None
        if data.get("shield") is not None:
            shield_data = require_mapping(data["shield"], f"{context}.shield")
            assert_required(shield_data, {"hp"}, f"{context}.shield")
            shield = ShieldSpec(
                id=optional(shield_data, "id", require_str, f"{context}.shield", status_id),
                hp=require_int(shield_data["hp"], f"{context}.shield.hp"),
                element=optional(shield_data, "element", require_str, f"{context}.shield"),
            )
        return StatusModifiers(
            atk=optional(data, "atk", require_int, context, 0),
            defense=optional(data, "def", require_int, context, 0),
            damage_taken_pct=optional(data, "damageTakenPct", require_number_map, context, {}),
            damage_dealt_pct=optional(data, "damageDealtPct", require_number_map, context, {}),
            resource_regen_per_turn={key: int(amount) for key, amount in regen.items()},
            dodge_bonus=float(optional(data, "dodgeBonus", require_number, context, 0.0)),
            crit_chance_bonus=float(optional(data, "critChanceBonus", require_number, context, 0.0)),
            shield=shield,
        )

    @staticmethod
    def _parse_hooks(value: object, context: str) -> StatusHooks:
        data = require_mapping(value, context)
        unknown = set(data) - set(HOOK_ATTRS)
        if unknown:
            raise DataValidationError(f"{context} has unknown hooks: {sorted(unknown)}")
        parsed = {
            HOOK_ATTRS[hook]: parse_effects(effects, f"{context}.{hook}")
            for hook, effects in data.items()
            if effects is not None
        }
        return StatusHooks(**parsed)
