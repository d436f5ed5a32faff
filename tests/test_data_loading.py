import json
from pathlib import Path

import pytest

from battlecore.data.content_loader import load_content
from battlecore.data.errors import DataLoadError, DataReferenceError, DataValidationError
from battlecore.data.repositories import (
    BalanceRepository,
    EnemiesRepository,
    ItemsRepository,
    SkillsRepository,
    StatusesRepository,
)

_MINIMAL = {
    "balance.json": {},
    "skills.json": {
        "jab": {"name": "Jab", "effects": [{"kind": "damage", "amount": 2}]},
    },
    "items.json": {},
    "statuses.json": {},
    "enemies.json": {"rat": {"name": "Rat", "base": {"maxHp": 5}, "skills": ["jab"]}},
    "classes.json": {"squire": {"base": {"maxHp": 20}, "skills": ["jab"]}},
}


def _write_definitions(tmp_path: Path, **overrides: object) -> Path:
    for filename, payload in _MINIMAL.items():
        data = overrides.get(filename.removesuffix(".json"), payload)
        (tmp_path / filename).write_text(json.dumps(data), encoding="utf-8")
    return tmp_path


def test_bundled_definitions_load() -> None:
    content = load_content()

    assert {"knight", "rogue", "mage"} <= set(content.classes)
    assert {"slime", "goblin"} <= set(content.enemies)
    assert content.balance.element_matrix["fire"]["slime"] == 1.5
    assert content.statuses["poison"].stack_rule == "stackMagnitude"
    assert content.items["whetstone"].consumable is False


def test_skill_fields_parse_with_defaults(tmp_path: Path) -> None:
    repo = SkillsRepository(base_path=_write_definitions(tmp_path))

    jab = repo.get("jab")

    assert jab.targeting.side == "enemy"
    assert jab.targeting.mode == "single"
    assert jab.costs.cooldown == 0
    assert jab.costs.charges is None
    effect = jab.effects[0]
    assert effect.value.kind == "flat"
    assert effect.value.amount == 2
    assert effect.can_miss is True
    assert effect.can_crit is False


def test_formula_and_costs_parse(tmp_path: Path) -> None:
    skills = {
        "hex": {
            "name": "Hex",
            "element": "dark",
            "targeting": {"side": "enemy", "mode": "lowest", "ofWhat": "hpPct", "count": 2},
            "effects": [
                {"kind": "damage", "formula": {"expr": "u.stats.atk * 2"}, "min": 1, "max": 9},
                {"kind": "applyStatus", "statusId": "doom", "onlyIf": {"not": {"test": {"key": "tag", "op": "eq", "value": "undead"}}}},
            ],
            "costs": {"mp": 3, "cooldown": 2, "charges": 4, "item": {"id": "candle"}},
            "canUse": {"all": [{"test": {"key": "mpPct", "op": "gte", "value": 0.5}}]},
            "aiWeight": 2,
        }
    }
    repo = SkillsRepository(base_path=_write_definitions(tmp_path, skills=skills))

    hex_skill = repo.get("hex")

    assert hex_skill.targeting.count == 2
    assert hex_skill.effects[0].value.kind == "formula"
    assert hex_skill.effects[0].value.expr == "u.stats.atk * 2"
    assert (hex_skill.effects[0].value.minimum, hex_skill.effects[0].value.maximum) == (1, 9)
    assert hex_skill.effects[1].only_if.negate.test.value == "undead"
    assert hex_skill.costs.item.item_id == "candle"
    assert hex_skill.costs.item.qty == 1
    assert hex_skill.can_use.all_of[0].test.key == "mpPct"
    assert hex_skill.ai_weight == 2.0


def test_status_modifiers_and_hooks_parse(tmp_path: Path) -> None:
    statuses = {
        "aegis": {
            "name": "Aegis",
            "tags": ["buff"],
            "maxStacks": 2,
            "stackRule": "stackCount",
            "durationTurns": 3,
            "modifiers": {
                "def": 2,
                "damageTakenPct": {"all": -0.2},
                "resourceRegenPerTurn": {"sta": 1},
                "shield": {"hp": 4},
            },
            "hooks": {"onExpire": [{"kind": "heal", "amount": 3}]},
        }
    }
    repo = StatusesRepository(base_path=_write_definitions(tmp_path, statuses=statuses))

    aegis = repo.get("aegis")

    assert aegis.modifiers.defense == 2
    assert aegis.modifiers.damage_taken_pct == {"all": -0.2}
    assert aegis.modifiers.resource_regen_per_turn == {"sta": 1}
    assert aegis.modifiers.shield.id == "aegis"
    assert aegis.hooks.on_expire[0].kind == "heal"


def test_unknown_hook_is_rejected(tmp_path: Path) -> None:
    statuses = {"odd": {"name": "Odd", "hooks": {"onSneeze": []}}}
    repo = StatusesRepository(base_path=_write_definitions(tmp_path, statuses=statuses))

    with pytest.raises(DataValidationError):
        repo.all()


def test_enemy_scale_defaults_to_no_growth(tmp_path: Path) -> None:
    repo = EnemiesRepository(base_path=_write_definitions(tmp_path))

    rat = repo.get("rat")

    assert rat.base.max_hp == 5
    assert rat.scale.max_hp == 0


def test_balance_defaults_fill_missing_keys(tmp_path: Path) -> None:
    balance = BalanceRepository(base_path=_write_definitions(tmp_path, balance={"FLEE_BASE": 0.5})).load()

    assert balance.flee_base == 0.5
    assert balance.base_hit == 0.85
    assert balance.element_matrix == {"neutral": {"neutral": 1.0}}


@pytest.mark.parametrize(
    "skills",
    [
        {"jab": {"effects": []}},
        {"jab": {"name": "Jab", "effects": [{"kind": "explode"}]}},
        {"jab": {"name": "Jab", "effects": [], "targeting": {"side": "sideways"}}},
        {"jab": {"name": "Jab", "effects": [], "costs": {"mp": "lots"}}},
        {"jab": {"name": "Jab", "effects": [{"kind": "damage", "valueType": "formula"}]}},
    ],
)
def test_malformed_skills_are_rejected(tmp_path: Path, skills: dict) -> None:
    repo = SkillsRepository(base_path=_write_definitions(tmp_path, skills=skills))

    with pytest.raises(DataValidationError):
        repo.all()


def test_unknown_filter_keys_are_kept(tmp_path: Path) -> None:
    skills = {"jab": {"name": "Jab", "effects": [], "canUse": {"test": {"key": "luck", "op": "approx", "value": 1}}}}
    repo = SkillsRepository(base_path=_write_definitions(tmp_path, skills=skills))

    assert repo.get("jab").can_use.test.key == "luck"


def test_missing_file_raises_load_error(tmp_path: Path) -> None:
    with pytest.raises(DataLoadError):
        ItemsRepository(base_path=tmp_path).all()


def test_invalid_json_raises_load_error(tmp_path: Path) -> None:
    (tmp_path / "items.json").write_text("{ not json", encoding="utf-8")

    with pytest.raises(DataLoadError):
        ItemsRepository(base_path=tmp_path).all()


def test_top_level_must_be_an_object(tmp_path: Path) -> None:
    (tmp_path / "items.json").write_text("[]", encoding="utf-8")

    with pytest.raises(DataValidationError):
        ItemsRepository(base_path=tmp_path).all()


def test_dangling_status_reference(tmp_path: Path) -> None:
    skills = {"hex": {"name": "Hex", "effects": [{"kind": "applyStatus", "statusId": "doom"}]}}

    with pytest.raises(DataReferenceError, match="unknown status 'doom'"):
        load_content(_write_definitions(tmp_path, skills=skills))


def test_dangling_class_skill(tmp_path: Path) -> None:
    classes = {"squire": {"base": {"maxHp": 20}, "skills": ["lunge"]}}

    with pytest.raises(DataReferenceError):
        load_content(_write_definitions(tmp_path, classes=classes))


def test_dangling_enemy_drop(tmp_path: Path) -> None:
    enemies = {"rat": {"name": "Rat", "base": {"maxHp": 5}, "items": [{"id": "cheese"}]}}

    with pytest.raises(DataReferenceError):
        load_content(_write_definitions(tmp_path, enemies=enemies))


def test_get_unknown_id_raises_key_error(tmp_path: Path) -> None:
    repo = SkillsRepository(base_path=_write_definitions(tmp_path))

    with pytest.raises(KeyError):
        repo.get("missing")
