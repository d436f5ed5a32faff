"""Structural validators and parsers shared by the definition repositories."""
from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Tuple

from battlecore.core.types import (
    EFFECT_KINDS,
    RESOURCES,
    STAT_KEYS,
    TARGET_MODES,
    TARGET_SIDES,
    VALUE_KINDS,
)
from battlecore.data.errors import DataValidationError
from battlecore.domain.defs import (
    ActionCost,
    DropDef,
    EffectDef,
    Filter,
    FilterTest,
    ItemCost,
    StatBlock,
    TargetSelector,
    ValueSpec,
)

# -----------------------
# Primitive validators
# -----------------------


def require_mapping(value: object, context: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise DataValidationError(f"{context} must be an object.")
    return value


def assert_required(payload: Mapping[str, object], required: Iterable[str], context: str) -> None:
    missing = set(required) - payload.keys()
    if missing:
        raise DataValidationError(f"{context} missing fields: {sorted(missing)}")


def require_str(value: object, context: str) -> str:
    if not isinstance(value, str):
        raise DataValidationError(f"{context} must be a string.")
    return value


def require_int(value: object, context: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise DataValidationError(f"{context} must be an integer.")
    return value


def require_number(value: object, context: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise DataValidationError(f"{context} must be a number.")
    return value


def require_bool(value: object, context: str) -> bool:
    if not isinstance(value, bool):
        raise DataValidationError(f"{context} must be a boolean.")
    return value


def require_str_list(value: object, context: str) -> List[str]:
    if not isinstance(value, list):
        raise DataValidationError(f"{context} must be a list.")
    result: List[str] = []
    for entry in value:
        if not isinstance(entry, str):
            raise DataValidationError(f"{context} entries must be strings.")
        result.append(entry)
    return result


def require_literal(value: object, allowed: Iterable[str], context: str) -> str:
    if not isinstance(value, str):
        raise DataValidationError(f"{context} must be a string.")
    allowed_set = set(allowed)
    if value not in allowed_set:
        raise DataValidationError(f"{context} must be one of {sorted(allowed_set)}.")
    return value


def require_number_map(value: object, context: str) -> Dict[str, float]:
    mapping = require_mapping(value, context)
    return {str(key): require_number(entry, f"{context}.{key}") for key, entry in mapping.items()}


def optional(payload: Mapping[str, object], key: str, parser, context: str, default=None):
    """Parse ``payload[key]`` with ``parser`` when present and not null."""
    value = payload.get(key)
    if value is None:
        return default
    return parser(value, f"{context}.{key}")


# -----------------------
# Composite definitions
# -----------------------


def parse_filter(value: object, context: str) -> Filter:
    """
    Parse a filter tree (``all``/``any``/``not``/``test``).

    Test keys and operators are only checked for type; unknown ones are
    kept and simply never match at runtime.
    """

    data = require_mapping(value, context)
    all_of = _parse_filter_list(data, "all", context)
    any_of = _parse_filter_list(data, "any", context)
    negate = optional(data, "not", parse_filter, context)
    test = None
    if data.get("test") is not None:
        test_data = require_mapping(data["test"], f"{context}.test")
        assert_required(test_data, {"key", "op"}, f"{context}.test")
        test = FilterTest(
            key=require_str(test_data["key"], f"{context}.test.key"),
            op=require_str(test_data["op"], f"{context}.test.op"),
            value=test_data.get("value"),
        )
    return Filter(all_of=all_of, any_of=any_of, negate=negate, test=test)


def _parse_filter_list(data: Mapping[str, object], key: str, context: str) -> Tuple[Filter, ...] | None:
    if data.get(key) is None:
        return None
    entries = _list(data[key], f"{context}.{key}")
    return tuple(parse_filter(entry, f"{context}.{key}[{index}]") for index, entry in enumerate(entries))


def _list(value: object, context: str) -> list:
    if not isinstance(value, list):
        raise DataValidationError(f"{context} must be a list.")
    return value


def parse_selector(value: object, context: str) -> TargetSelector:
    data = require_mapping(value, context)
    count = optional(data, "count", require_int, context)
    return TargetSelector(
        side=require_literal(data.get("side", "enemy"), TARGET_SIDES, f"{context}.side"),
        mode=require_literal(data.get("mode", "single"), TARGET_MODES, f"{context}.mode"),
        count=count,
        of_what=optional(data, "ofWhat", require_str, context),
        condition=optional(data, "condition", parse_filter, context),
        include_dead=optional(data, "includeDead", require_bool, context, False),
    )


def parse_value(data: Mapping[str, object], context: str) -> ValueSpec:
    """Build the magnitude of an effect from its flattened value fields."""
    explicit_kind = data.get("valueType")
    if explicit_kind is None:
        if data.get("formula") is not None:
            explicit_kind = "formula"
        elif data.get("percent") is not None:
            explicit_kind = "percent"
        else:
            explicit_kind = "flat"
    kind = require_literal(explicit_kind, VALUE_KINDS, f"{context}.valueType")

    expr = None
    if data.get("formula") is not None:
        formula = data["formula"]
        if isinstance(formula, str):
            expr = formula
        else:
            formula_data = require_mapping(formula, f"{context}.formula")
            expr = require_str(formula_data.get("expr"), f"{context}.formula.expr")
    if kind == "formula" and not expr:
        raise DataValidationError(f"{context} uses valueType 'formula' without a formula expression.")

    return ValueSpec(
        kind=kind,
        amount=optional(data, "amount", require_number, context, 0),
        percent=optional(data, "percent", require_number, context, 0),
        expr=expr,
        minimum=optional(data, "min", require_number, context),
        maximum=optional(data, "max", require_number, context),
    )


def parse_effect(value: object, context: str) -> EffectDef:
    data = require_mapping(value, context)
    assert_required(data, {"kind"}, context)
    kind = require_literal(data["kind"], EFFECT_KINDS, f"{context}.kind")
    cleanse_tags = optional(data, "cleanseTags", require_str_list, context)
    return EffectDef(
        kind=kind,
        value=parse_value(data, context),
        element=optional(data, "element", require_str, context),
        can_miss=optional(data, "canMiss", require_bool, context, True),
        can_crit=optional(data, "canCrit", require_bool, context, False),
        shared_accuracy_roll=optional(data, "sharedAccuracyRoll", require_bool, context, False),
        resource=_optional_literal(data, "resource", RESOURCES, context),
        stat=_optional_literal(data, "stat", STAT_KEYS, context),
        status_id=optional(data, "statusId", require_str, context),
        status_turns=optional(data, "statusTurns", require_int, context),
        cleanse_tags=tuple(cleanse_tags) if cleanse_tags is not None else None,
        shield_id=optional(data, "shieldId", require_str, context),
        summon_id=optional(data, "summonId", require_str, context),
        item_id=optional(data, "itemId", require_str, context),
        message=optional(data, "message", require_str, context),
        selector=optional(data, "selector", parse_selector, context),
        only_if=optional(data, "onlyIf", parse_filter, context),
    )


def _optional_literal(data: Mapping[str, object], key: str, allowed: Iterable[str], context: str) -> str | None:
    value = data.get(key)
    if value is None:
        return None
    return require_literal(value, allowed, f"{context}.{key}")


def parse_effects(value: object, context: str) -> Tuple[EffectDef, ...]:
    return tuple(parse_effect(entry, f"{context}[{index}]") for index, entry in enumerate(_list(value, context)))


def parse_costs(value: object, context: str) -> ActionCost:
    data = require_mapping(value, context)
    item = None
    if data.get("item") is not None:
        item_data = require_mapping(data["item"], f"{context}.item")
        assert_required(item_data, {"id"}, f"{context}.item")
        item = ItemCost(
            item_id=require_str(item_data["id"], f"{context}.item.id"),
            qty=optional(item_data, "qty", require_int, f"{context}.item", 1),
        )
    return ActionCost(
        sta=optional(data, "sta", require_int, context, 0),
        mp=optional(data, "mp", require_int, context, 0),
        item=item,
        cooldown=optional(data, "cooldown", require_int, context, 0),
        charges=optional(data, "charges", require_int, context),
    )


def parse_stat_block(value: object, context: str, *, default_max_hp: int = 1) -> StatBlock:
    data = require_mapping(value, context)
    return StatBlock(
        max_hp=optional(data, "maxHp", require_int, context, default_max_hp),
        max_sta=optional(data, "maxSta", require_int, context, 0),
        max_mp=optional(data, "maxMp", require_int, context, 0),
        atk=optional(data, "atk", require_int, context, 0),
        defense=optional(data, "def", require_int, context, 0),
    )


def parse_drops(value: object, context: str) -> Tuple[DropDef, ...]:
    drops: List[DropDef] = []
    for index, entry in enumerate(_list(value, context)):
        entry_context = f"{context}[{index}]"
        data = require_mapping(entry, entry_context)
        assert_required(data, {"id"}, entry_context)
        drops.append(
            DropDef(
                item_id=require_str(data["id"], f"{entry_context}.id"),
                qty=optional(data, "qty", require_int, entry_context, 1),
            )
        )
    return tuple(drops)


def parse_action_fields(raw_id: str, data: Mapping[str, object], context: str) -> Dict[str, Any]:
    """Fields shared by skills and items, as keyword arguments for their definitions."""
    assert_required(data, {"name", "effects"}, context)
    return {
        "id": raw_id,
        "name": require_str(data["name"], f"{context}.name"),
        "description": optional(data, "desc", require_str, context, ""),
        "element": optional(data, "element", require_str, context),
        "targeting": optional(data, "targeting", parse_selector, context, TargetSelector()),
        "effects": parse_effects(data["effects"], f"{context}.effects"),
        "can_use": optional(data, "canUse", parse_filter, context),
        "costs": optional(data, "costs", parse_costs, context, ActionCost()),
        "ai_weight": float(optional(data, "aiWeight", require_number, context, 1.0)),
    }

