"""Domain definition exports."""

from .action_def import ActionCost, ActionDef, ItemCost
from .balance_def import Balance
from .class_def import ClassDef
from .effect_def import EffectDef, ValueSpec
from .enemy_def import DropDef, EnemyDef, StatBlock
from .filter_def import Filter, FilterTest
from .item_def import ItemDef
from .selector_def import TargetSelector
from .skill_def import SkillDef
from .status_def import ShieldSpec, StatusHooks, StatusModifiers, StatusTemplate

__all__ = [
    "ActionCost",
    "ActionDef",
    "Balance",
    "ClassDef",
    "DropDef",
    "EffectDef",
    "EnemyDef",
    "Filter",
    "FilterTest",
    "ItemCost",
    "ItemDef",
    "ShieldSpec",
    "SkillDef",
    "StatBlock",
    "StatusHooks",
    "StatusModifiers",
    "StatusTemplate",
    "TargetSelector",
    "ValueSpec",
]
