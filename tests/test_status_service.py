from battlecore.domain.defs import EffectDef, StatusHooks, StatusModifiers, StatusTemplate, TargetSelector, ValueSpec
from battlecore.domain.defs.status_def import ShieldSpec

from tests.helpers.battle_builders import flat, make_actor, make_content, make_executors, make_state, sure_damage

BURN = StatusTemplate(
    id="burn",
    name="Burn",
    tags=("fire", "dot"),
    duration_turns=2,
    hooks=StatusHooks(on_turn_end=(EffectDef(kind="damage", value=flat(3)),)),
)
POISON = StatusTemplate(
    id="poison",
    name="Poison",
    tags=("poison", "dot"),
    stack_rule="stackMagnitude",
    max_stacks=3,
    duration_turns=3,
    hooks=StatusHooks(on_turn_end=(EffectDef(kind="damage", value=flat(2)),)),
)
STUN = StatusTemplate(id="stun", name="Stun", tags=("control",), stack_rule="ignore", duration_turns=1)
WEAKEN = StatusTemplate(
    id="weaken",
    name="Weaken",
    stack_rule="stackCount",
    max_stacks=2,
    duration_turns=2,
    modifiers=StatusModifiers(atk=-2, defense=-3),
)
BARRIER = StatusTemplate(
    id="barrier",
    name="Barrier",
    duration_turns=2,
    modifiers=StatusModifiers(shield=ShieldSpec(id="barrier", hp=6)),
)
REGEN = StatusTemplate(
    id="regen",
    name="Regen",
    duration_turns=1,
    modifiers=StatusModifiers(resource_regen_per_turn={"hp": 4}),
)
THORNS = StatusTemplate(
    id="thorns",
    name="Thorns",
    duration_turns=3,
    hooks=StatusHooks(on_take_damage=(EffectDef(kind="damage", value=flat(2)),)),
)
MIRROR = StatusTemplate(
    id="mirror",
    name="Mirror",
    duration_turns=3,
    hooks=StatusHooks(
        on_take_damage=(EffectDef(kind="damage", value=flat(1), selector=TargetSelector(side="self", mode="self")),)
    ),
)


def _make_engine(*statuses):
    content = make_content(statuses=statuses or (BURN, POISON, STUN, WEAKEN, BARRIER, REGEN, THORNS, MIRROR))
    effects, _ = make_executors(content)
    state = make_state([make_actor("hero", hp=30)], [make_actor("slime", hp=30)])
    return effects, state


def test_first_application_adds_one_stack_and_logs() -> None:
    effects, state = _make_engine()

    assert effects.statuses.apply_status(state, "slime", "burn", source_id="hero")

    entry = state.actors["slime"].find_status("burn")
    assert entry is not None
    assert (entry.stacks, entry.turns, entry.source_id) == (1, 2, "hero")
    assert state.log[-1] == "Slime is afflicted by Burn for 2 turns."


def test_unknown_status_is_logged_and_ignored() -> None:
    effects, state = _make_engine()

    assert not effects.statuses.apply_status(state, "slime", "frozen")
    assert state.actors["slime"].statuses == []
    assert "not defined" in state.log[-1]


def test_ignore_rule_keeps_existing_instance() -> None:
    effects, state = _make_engine()
    effects.statuses.apply_status(state, "hero", "stun")
    state.actors["hero"].statuses[0].turns = 5

    assert not effects.statuses.apply_status(state, "hero", "stun")
    assert state.actors["hero"].statuses[0].turns == 5


def test_renew_resets_duration_without_stacking() -> None:
    effects, state = _make_engine()
    effects.statuses.apply_status(state, "slime", "burn")
    state.actors["slime"].statuses[0].turns = 1

    effects.statuses.apply_status(state, "slime", "burn")

    entry = state.actors["slime"].find_status("burn")
    assert (entry.stacks, entry.turns) == (1, 2)
    assert "refreshed" in state.log[-1]


def test_stack_count_is_capped_and_scales_stat_deltas() -> None:
    effects, state = _make_engine()
    slime = state.actors["slime"]

    for _ in range(3):
        effects.statuses.apply_status(state, "slime", "weaken")

    assert slime.find_status("weaken").stacks == 2
    assert (slime.stats.atk, slime.stats.defense) == (1, 0)

    effects.statuses.dispel(state, slime, "weaken")

    assert (slime.stats.atk, slime.stats.defense) == (5, 2)


def test_stack_magnitude_scales_hook_damage() -> None:
    effects, state = _make_engine()
    effects.statuses.apply_status(state, "slime", "poison", source_id="hero")
    effects.statuses.apply_status(state, "slime", "poison", source_id="hero")

    effects.statuses.tick_end_of_turn(state, "slime")

    assert state.actors["slime"].stats.hp == 26
    assert "Slime suffers 4 damage from Poison." in state.log


def test_end_of_turn_ticks_and_expires() -> None:
    effects, state = _make_engine()
    effects.statuses.apply_status(state, "slime", "burn", source_id="hero")

    effects.statuses.tick_end_of_turn(state, "slime")
    assert state.actors["slime"].find_status("burn").turns == 1

    effects.statuses.tick_end_of_turn(state, "slime")

    assert state.actors["slime"].find_status("burn") is None
    assert state.actors["slime"].stats.hp == 24
    assert "Burn expired on Slime." in state.log


def test_regen_still_applies_on_the_final_turn() -> None:
    effects, state = _make_engine()
    hero = state.actors["hero"]
    hero.stats.hp = 10
    effects.statuses.apply_status(state, "hero", "regen")

    effects.statuses.tick_end_of_turn(state, "hero")

    assert hero.stats.hp == 14
    assert hero.statuses == []


def test_status_shield_is_granted_and_cleared_on_expiry() -> None:
    effects, state = _make_engine()
    effects.statuses.apply_status(state, "hero", "barrier")

    assert state.shields["hero"]["barrier"].hp == 6

    effects.statuses.dispel(state, state.actors["hero"])

    assert "hero" not in state.shields


def test_cleanse_removes_only_matching_tags() -> None:
    effects, state = _make_engine()
    slime = state.actors["slime"]
    effects.statuses.apply_status(state, "slime", "burn")
    effects.statuses.apply_status(state, "slime", "stun")

    removed = effects.statuses.cleanse(state, slime, ["fire"])

    assert removed == ["Burn"]
    assert slime.status_ids() == ["stun"]


def test_take_damage_hook_strikes_back_at_attacker() -> None:
    effects, state = _make_engine()
    effects.statuses.apply_status(state, "slime", "thorns")

    effects.apply_effect(state, sure_damage(5), "hero", ["slime"])

    assert state.actors["slime"].stats.hp == 25
    assert state.actors["hero"].stats.hp == 28
    assert "Hero suffers 2 damage from Thorns." in state.log


def test_hooks_do_not_retrigger_themselves() -> None:
    effects, state = _make_engine()
    effects.statuses.apply_status(state, "slime", "mirror")

    effects.apply_effect(state, sure_damage(5), "hero", ["slime"])

    # one direct hit plus exactly one self-inflicted mirror tick
    assert state.actors["slime"].stats.hp == 24


LEECH = StatusTemplate(
    id="leech",
    name="Leech",
    duration_turns=3,
    hooks=StatusHooks(
        on_deal_damage=(EffectDef(kind="heal", value=ValueSpec(kind="formula", expr="floor(amount / 2)")),)
    ),
)
BRITTLE = StatusTemplate(
    id="brittle",
    name="Brittle",
    duration_turns=1,
    hooks=StatusHooks(on_expire=(EffectDef(kind="damage", value=flat(5)),)),
)


def test_deal_damage_hook_heals_the_attacker() -> None:
    effects, state = _make_engine(LEECH)
    hero = state.actors["hero"]
    hero.stats.hp = 20
    effects.statuses.apply_status(state, "hero", "leech")

    effects.apply_effect(state, sure_damage(6), "hero", ["slime"])

    assert state.actors["slime"].stats.hp == 24
    assert hero.stats.hp == 23
    assert state.log[-1] == "Hero recovers 3 HP from Leech."


def test_expire_hook_fires_when_duration_runs_out() -> None:
    effects, state = _make_engine(BRITTLE)
    effects.statuses.apply_status(state, "slime", "brittle", source_id="hero")

    effects.statuses.tick_end_of_turn(state, "slime")

    slime = state.actors["slime"]
    assert slime.find_status("brittle") is None
    assert slime.stats.hp == 25
    assert state.log[-2:] == ["Brittle expired on Slime.", "Slime suffers 5 damage from Brittle."]
