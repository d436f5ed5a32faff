import math

import pytest

from battlecore.domain.defs import ValueSpec
from battlecore.domain.value_resolver import FormulaError, compile_formula, evaluate_formula, resolve

from tests.helpers.battle_builders import make_actor


def test_flat_value_is_clamped() -> None:
    user = make_actor("hero")
    target = make_actor("slime")

    assert resolve(ValueSpec(kind="flat", amount=7), user, target) == 7
    assert resolve(ValueSpec(kind="flat", amount=7, maximum=5), user, target) == 5
    assert resolve(ValueSpec(kind="flat", amount=-3, minimum=0), user, target) == 0


def test_percent_uses_target_max_hp() -> None:
    user = make_actor("hero")
    target = make_actor("slime", hp=10, max_hp=40)

    assert resolve(ValueSpec(kind="percent", percent=25), user, target, effect_kind="heal") == 10


def test_percent_of_a_resource_uses_that_resource_max() -> None:
    user = make_actor("hero")
    target = make_actor("mage", mp=30)

    value = ValueSpec(kind="percent", percent=50)

    assert resolve(value, user, target, effect_kind="resource", resource="mp") == 15


def test_formula_reads_user_and_target_stats() -> None:
    user = make_actor("hero", atk=10)
    target = make_actor("slime", defense=4)

    assert evaluate_formula("u.stats.atk * 2 - t.stats.def", user, target) == 16
    assert evaluate_formula("max(1, t.stats.def - u.stats.atk)", user, target) == 1
    assert evaluate_formula("floor(u.stats.atk / 3) + stacks", user, target, stacks=2) == 5
    assert evaluate_formula("-(amount) % 4", user, target, amount=6) == 2


def test_formula_precedence_and_parentheses() -> None:
    user = make_actor("hero")

    assert evaluate_formula("2 + 3 * 4", user, user) == 14
    assert evaluate_formula("(2 + 3) * 4", user, user) == 20
    assert evaluate_formula("round(7 / 2)", user, user) == 4


def test_malformed_formula_raises_on_compile() -> None:
    for expr in ("u.stats.atk +", "u.stats.luck", "2 $ 3", "open(1)", "(1 + 2"):
        with pytest.raises(FormulaError):
            compile_formula(expr)


def test_malformed_or_failing_formula_resolves_to_zero() -> None:
    user = make_actor("hero")
    target = make_actor("slime", defense=0)

    assert resolve(ValueSpec(kind="formula", expr="u.stats.atk +"), user, target) == 0
    assert resolve(ValueSpec(kind="formula", expr="u.stats.atk / t.stats.def"), user, target) == 0
    assert resolve(ValueSpec(kind="formula", expr=None), user, target) == 0


def test_scale_applies_before_clamp() -> None:
    user = make_actor("hero")

    value = ValueSpec(kind="flat", amount=3, maximum=5)

    assert resolve(value, user, user, scale=3) == 5
    assert resolve(ValueSpec(kind="flat", amount=3), user, user, scale=3) == 9


def test_non_finite_results_are_zero() -> None:
    user = make_actor("hero")

    assert resolve(ValueSpec(kind="flat", amount=math.inf), user, user) == 0


def test_percent_bounds_clamp_the_share_not_the_amount() -> None:
    target = make_actor("hero", hp=50, max_hp=100)

    capped = ValueSpec(kind="percent", percent=25, minimum=0, maximum=1)
    assert resolve(capped, target, target, effect_kind="heal") == 25
    assert resolve(ValueSpec(kind="percent", percent=150, maximum=1), target, target, effect_kind="heal") == 100
    assert resolve(ValueSpec(kind="percent", percent=10, minimum=0.2), target, target, effect_kind="heal") == 20


def test_deeply_nested_formula_resolves_to_zero() -> None:
    user = make_actor("hero")
    expr = "(" * 600 + "1" + ")" * 600

    assert resolve(ValueSpec(kind="formula", expr=expr), user, user) == 0
