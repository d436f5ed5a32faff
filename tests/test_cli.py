import json
from pathlib import Path

from battlecore.presentation.cli import app
from battlecore.presentation.cli.render import debug_enabled, format_actor_line, render_log

from tests.helpers.battle_builders import make_actor


def test_single_battle_prints_log_and_roster(capsys) -> None:
    exit_code = app.main(["--class", "knight", "--enemy", "slime", "--seed", "5"])

    out = capsys.readouterr().out
    assert exit_code == 0
    assert "Battle start! Slime appeared." in out
    assert "== Turn 1 ==" in out
    assert "-- Party --" in out
    assert "Knight [knight]" in out


def test_many_battles_print_a_summary(capsys) -> None:
    exit_code = app.main(["--class", "mage", "--enemy", "goblin", "--battles", "3", "--seed", "9"])

    out = capsys.readouterr().out
    assert exit_code == 0
    assert out.count("Battle ") >= 3
    assert "battles." in out.splitlines()[-1]


def test_repeated_class_gets_numbered_ids(capsys) -> None:
    app.main(["--class", "knight", "--class", "knight", "--enemy", "slime"])

    out = capsys.readouterr().out
    assert "Knight 2 [knight_2]" in out


def test_unknown_enemy_fails_cleanly(capsys) -> None:
    exit_code = app.main(["--enemy", "dragon"])

    assert exit_code == 1
    assert "Could not start battle" in capsys.readouterr().out


def test_bad_definitions_directory_fails_cleanly(capsys, tmp_path: Path) -> None:
    (tmp_path / "balance.json").write_text(json.dumps({}), encoding="utf-8")

    exit_code = app.main(["--definitions", str(tmp_path)])

    assert exit_code == 1
    assert "Could not load definitions" in capsys.readouterr().out


def test_debug_flag_requires_explicit_one(monkeypatch) -> None:
    monkeypatch.setenv("BATTLECORE_DEBUG", "1")
    assert debug_enabled()
    monkeypatch.setenv("BATTLECORE_DEBUG", "yes")
    assert not debug_enabled()


def test_render_helpers() -> None:
    hero = make_actor("hero", hp=12, max_hp=20)
    fallen = make_actor("slime", hp=0, max_hp=10)

    assert format_actor_line(hero) == "Hero [hero]: HP 12/20 STA 10/10 MP 10/10"
    assert format_actor_line(fallen) == "Slime [slime]: DOWN"
    assert render_log(["Turn 2", "Hero waits cautiously."]) == ["", "== Turn 2 ==", "  Hero waits cautiously."]
