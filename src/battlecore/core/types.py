"""Shared type aliases for the core and domain layers."""
from typing import Literal

TargetSide = Literal["self", "ally", "enemy", "any"]
TargetMode = Literal["self", "single", "all", "random", "lowest", "highest", "condition"]
Resource = Literal["hp", "sta", "mp"]
CompareKey = Literal["hpPct", "staPct", "mpPct", "atk", "def", "lv", "hasStatus", "tag", "clazz"]
ConditionOp = Literal["lt", "lte", "eq", "gte", "gt", "ne", "in", "notIn"]
ValueKind = Literal["flat", "percent", "formula"]
StatKey = Literal["atk", "def", "maxHp", "maxSta", "maxMp"]
StackRule = Literal["ignore", "renew", "stackCount", "stackMagnitude"]
EndReason = Literal["victory", "defeat", "fled"]
EffectKind = Literal[
    "damage",
    "heal",
    "resource",
    "applyStatus",
    "cleanseStatus",
    "dispel",
    "modifyStat",
    "shield",
    "taunt",
    "flee",
    "revive",
    "summon",
    "giveItem",
    "removeItem",
    "preventAction",
]
HookName = Literal["onTurnStart", "onTurnEnd", "onDealDamage", "onTakeDamage", "onApply", "onExpire"]

TARGET_SIDES: tuple[str, ...] = ("self", "ally", "enemy", "any")
TARGET_MODES: tuple[str, ...] = ("self", "single", "all", "random", "lowest", "highest", "condition")
RESOURCES: tuple[str, ...] = ("hp", "sta", "mp")
COMPARE_KEYS: tuple[str, ...] = ("hpPct", "staPct", "mpPct", "atk", "def", "lv", "hasStatus", "tag", "clazz")
CONDITION_OPS: tuple[str, ...] = ("lt", "lte", "eq", "gte", "gt", "ne", "in", "notIn")
VALUE_KINDS: tuple[str, ...] = ("flat", "percent", "formula")
STAT_KEYS: tuple[str, ...] = ("atk", "def", "maxHp", "maxSta", "maxMp")
STACK_RULES: tuple[str, ...] = ("ignore", "renew", "stackCount", "stackMagnitude")
EFFECT_KINDS: tuple[str, ...] = (
    "damage",
    "heal",
    "resource",
    "applyStatus",
    "cleanseStatus",
    "dispel",
    "modifyStat",
    "shield",
    "taunt",
    "flee",
    "revive",
    "summon",
    "giveItem",
    "removeItem",
    "preventAction",
)
HOOK_NAMES: tuple[str, ...] = ("onTurnStart", "onTurnEnd", "onDealDamage", "onTakeDamage", "onApply", "onExpire")

__all__ = [
    "COMPARE_KEYS",
    "CONDITION_OPS",
    "CompareKey",
    "ConditionOp",
    "EFFECT_KINDS",
    "EffectKind",
    "EndReason",
    "HOOK_NAMES",
    "HookName",
    "RESOURCES",
    "Resource",
    "STACK_RULES",
    "STAT_KEYS",
    "StackRule",
    "StatKey",
    "TARGET_MODES",
    "TARGET_SIDES",
    "TargetMode",
    "TargetSide",
    "VALUE_KINDS",
    "ValueKind",
]
