"""Boolean filter evaluation over actor attributes."""
from __future__ import annotations

from typing import Any, Callable, Dict

from battlecore.domain.defs import Filter, FilterTest
from battlecore.domain.entities import Actor

_MEMBERSHIP_KEYS = ("hasStatus", "tag")


def _ratio(current: int, maximum: int) -> float:
    if maximum <= 0:
        return 0.0
    return current / maximum


def metric_value(actor: Actor, key: str) -> Any:
    """Derive the metric a filter test compares against, or None when unknown."""
    stats = actor.stats
    if key == "hpPct":
        return _ratio(stats.hp, stats.max_hp)
    if key == "staPct":
        return _ratio(stats.sta, stats.max_sta)
    if key == "mpPct":
        return _ratio(stats.mp, stats.max_mp)
    if key == "atk":
        return stats.atk
    if key == "def":
        return stats.defense
    if key == "lv":
        return stats.lv
    if key == "hasStatus":
        return set(actor.status_ids())
    if key == "tag":
        return set(actor.tags)
    if key == "clazz":
        return actor.clazz
    return None


_NUMERIC_OPS: Dict[str, Callable[[Any, Any], bool]] = {
    "lt": lambda left, right: left < right,
    "lte": lambda left, right: left <= right,
    "gte": lambda left, right: left >= right,
    "gt": lambda left, right: left > right,
}


def _as_collection(value: Any) -> tuple:
    if isinstance(value, (list, tuple, set, frozenset)):
        return tuple(value)
    return (value,)


def _compare_membership(members: set, op: str, value: Any) -> bool:
    if op == "eq":
        return value in members
    if op == "ne":
        return value not in members
    if op == "in":
        return any(entry in members for entry in _as_collection(value))
    if op == "notIn":
        return not any(entry in members for entry in _as_collection(value))
    return False


def _compare_scalar(metric: Any, op: str, value: Any) -> bool:
    if op == "eq":
        return metric == value
    if op == "ne":
        return metric != value
    if op == "in":
        return metric in _as_collection(value)
    if op == "notIn":
        return metric not in _as_collection(value)
    comparator = _NUMERIC_OPS.get(op)
    if comparator is None:
        return False
    if isinstance(metric, bool) or isinstance(value, bool):
        return False
    if not isinstance(metric, (int, float)) or not isinstance(value, (int, float)):
        return False
    return comparator(metric, value)


def evaluate_test(actor: Actor, test: FilterTest) -> bool:
    metric = metric_value(actor, test.key)
    if metric is None and test.key != "clazz":
        return False
    try:
        if test.key in _MEMBERSHIP_KEYS:
            return _compare_membership(metric, test.op, test.value)
        return _compare_scalar(metric, test.op, test.value)
    except TypeError:
        return False


def matches(actor: Actor, filter_def: Filter | None) -> bool:
    """
    Evaluate a filter tree against an actor.

    A missing filter passes. Populated branches are combined with AND.
    Unknown keys, unknown operators and incomparable values fail the test
    instead of raising.
    """

    if filter_def is None:
        return True
    if filter_def.all_of is not None:
        if not all(matches(actor, child) for child in filter_def.all_of):
            return False
    if filter_def.any_of is not None:
        if not any(matches(actor, child) for child in filter_def.any_of):
            return False
    if filter_def.negate is not None:
        if matches(actor, filter_def.negate):
            return False
    if filter_def.test is not None:
        if not evaluate_test(actor, filter_def.test):
            return False
    return True


__all__ = ["evaluate_test", "matches", "metric_value"]
