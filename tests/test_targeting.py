from battlecore.domain.battle_models import TauntState
from battlecore.domain.defs import Filter, TargetSelector
from battlecore.domain.targeting import candidate_pool, resolve_targets

from tests.helpers.battle_builders import make_actor, make_state


def _make_battle(**enemy_hp):
    enemies = [make_actor(enemy_id, hp=hp, max_hp=max(hp, 1)) for enemy_id, hp in enemy_hp.items()]
    return make_state([make_actor("hero"), make_actor("ally")], enemies)


def test_single_enemy_picks_first_in_roster() -> None:
    state = _make_battle(slime=10, goblin=10)

    assert resolve_targets(state, TargetSelector(side="enemy", mode="single"), "hero") == ["slime"]


def test_taunt_forces_the_taunt_source() -> None:
    state = _make_battle(slime=10, goblin=10)
    state.taunts["hero"] = TauntState(source_id="goblin", turns=1)

    assert resolve_targets(state, TargetSelector(side="enemy", mode="single"), "hero") == ["goblin"]
    assert resolve_targets(state, TargetSelector(side="enemy", mode="single"), "hero", ["slime"]) == ["goblin"]


def test_taunt_does_not_redirect_ally_selectors() -> None:
    state = _make_battle(slime=10, goblin=10)
    state.taunts["hero"] = TauntState(source_id="goblin", turns=1)

    assert resolve_targets(state, TargetSelector(side="ally", mode="all"), "hero") == ["hero", "ally"]
    assert "hero" in state.taunts


def test_taunt_from_defeated_source_is_cleared() -> None:
    state = _make_battle(slime=10, goblin=10)
    state.taunts["hero"] = TauntState(source_id="goblin", turns=1)
    state.actors["goblin"].alive = False

    assert resolve_targets(state, TargetSelector(side="enemy", mode="single"), "hero") == ["slime"]
    assert "hero" not in state.taunts


def test_random_picks_distinct_targets_and_advances_seed() -> None:
    state = _make_battle(slime=10, goblin=10, bat=10)
    seed_before = state.rng_seed

    picked = resolve_targets(state, TargetSelector(side="enemy", mode="random", count=2), "hero")

    assert len(picked) == 2
    assert len(set(picked)) == 2
    assert set(picked) <= {"slime", "goblin", "bat"}
    assert state.rng_seed != seed_before


def test_random_is_reproducible_from_the_same_seed() -> None:
    selector = TargetSelector(side="enemy", mode="random", count=2)
    first = _make_battle(slime=10, goblin=10, bat=10)
    second = _make_battle(slime=10, goblin=10, bat=10)

    assert resolve_targets(first, selector, "hero") == resolve_targets(second, selector, "hero")
    assert first.rng_seed == second.rng_seed


def test_lowest_orders_by_hp_fraction() -> None:
    state = make_state(
        [make_actor("hero")],
        [make_actor("ogre", hp=10, max_hp=100), make_actor("wolf", hp=40, max_hp=80)],
    )

    selector = TargetSelector(side="enemy", mode="lowest", of_what="hpPct", count=2)

    assert resolve_targets(state, selector, "hero") == ["ogre", "wolf"]
    highest = TargetSelector(side="enemy", mode="highest", of_what="hpPct")
    assert resolve_targets(state, highest, "hero") == ["wolf"]


def test_lowest_ties_keep_roster_order() -> None:
    state = _make_battle(slime=10, goblin=10)

    assert resolve_targets(state, TargetSelector(side="enemy", mode="lowest", count=2), "hero") == ["slime", "goblin"]
    assert resolve_targets(state, TargetSelector(side="enemy", mode="highest", count=2), "hero") == ["slime", "goblin"]


def test_condition_mode_filters_and_limits() -> None:
    state = make_state(
        [make_actor("hero")],
        [make_actor("slime", tags=["slime"]), make_actor("goblin"), make_actor("ooze", tags=["slime"])],
    )

    selector = TargetSelector(side="enemy", mode="condition", condition=Filter.where("tag", "eq", "slime"))
    limited = TargetSelector(side="enemy", mode="condition", count=1, condition=Filter.where("tag", "eq", "slime"))

    assert resolve_targets(state, selector, "hero") == ["slime", "ooze"]
    assert resolve_targets(state, limited, "hero") == ["slime"]


def test_dead_actors_are_excluded_unless_requested() -> None:
    state = _make_battle(slime=10)
    state.actors["ally"].alive = False

    assert candidate_pool(state, "ally", "hero") == ["hero"]
    assert candidate_pool(state, "ally", "hero", include_dead=True) == ["hero", "ally"]
    selector = TargetSelector(side="ally", mode="single", include_dead=True)
    assert resolve_targets(state, selector, "hero", ["ally"]) == ["ally"]


def test_any_side_starts_with_self() -> None:
    state = _make_battle(slime=10)

    assert candidate_pool(state, "any", "ally") == ["ally", "hero", "slime"]


def test_empty_selection_is_an_empty_list() -> None:
    state = _make_battle(slime=10)
    state.actors["slime"].alive = False

    assert resolve_targets(state, TargetSelector(side="enemy", mode="all"), "hero") == []
    assert resolve_targets(state, TargetSelector(side="enemy", mode="single"), "hero", ["ghost"]) == []
