import pytest

from battlecore.data.content_loader import load_content
from battlecore.services import BattleService, BattleSetupError


def _service() -> BattleService:
    return BattleService(load_content())


def test_start_battle_builds_roster_and_log() -> None:
    service = _service()
    hero = service.create_player("knight", "Aria")

    state = service.start_battle([hero], ["slime", "slime"], level=2, seed=11)

    assert state.side_player == ["hero"]
    assert state.side_enemy == ["slime", "slime_2"]
    assert state.order == ["hero", "slime", "slime_2"]
    assert state.rng_seed == 11
    assert state.log == ["Battle start! Slime, Slime appeared.", "Turn 1"]
    assert state.actors["slime"].stats.max_hp == 14 + 3 * 2


def test_party_starts_with_class_items() -> None:
    service = _service()
    party = [
        service.create_player("knight", "Aria", actor_id="knight"),
        service.create_player("rogue", "Vex", actor_id="rogue"),
    ]

    state = service.start_battle(party, ["goblin"])

    stock = {entry.item_id: entry.qty for entry in state.inventory}
    assert stock == {"potion": 3, "smoke_bomb": 1}


def test_setup_errors_raise() -> None:
    service = _service()
    hero = service.create_player("mage", "Iris")

    with pytest.raises(BattleSetupError):
        service.create_player("bard", "Nope")
    with pytest.raises(BattleSetupError):
        service.start_battle([], ["slime"])
    with pytest.raises(BattleSetupError):
        service.start_battle([hero], [])
    with pytest.raises(BattleSetupError):
        service.start_battle([hero], ["dragon"])
    with pytest.raises(BattleSetupError):
        service.start_battle([hero, service.create_player("knight", "Twin")], ["slime"])


def test_use_skill_by_id() -> None:
    service = _service()
    state = service.start_battle([service.create_player("mage", "Iris")], ["goblin"], seed=3)

    result = service.use_skill(state, "firebolt", "hero")

    assert result.ok
    assert state.actors["hero"].stats.mp == 12
    assert "Iris used Firebolt." in result.log


def test_unknown_skill_id_raises_key_error() -> None:
    service = _service()
    state = service.start_battle([service.create_player("mage", "Iris")], ["goblin"])

    with pytest.raises(KeyError):
        service.use_skill(state, "meteor", "hero")


def test_available_skills_respect_costs() -> None:
    service = _service()
    state = service.start_battle([service.create_player("mage", "Iris")], ["goblin"])
    state.actors["hero"].stats.mp = 4

    available = [skill.id for skill in service.get_available_skills(state, "hero")]

    assert available == ["strike", "firebolt", "mend"]
    assert state.log[-1] == "Turn 1"


def test_available_items_come_from_inventory() -> None:
    service = _service()
    state = service.start_battle([service.create_player("rogue", "Vex")], ["goblin"])

    assert [item.id for item in service.get_available_items(state, "hero")] == ["potion", "smoke_bomb"]
