"""Tests for configuration loading and the text CLI."""

import os
from pathlib import Path

import pytest
from click.testing import CliRunner

from game.config import load_config
from game.core import ReunionGame
from main import main, run_command
from story.phases import ScenePhase

CONFIG_DIR = Path(__file__).resolve().parents[3] / "config"


def test_bundled_settings_load():
    cfg = load_config(CONFIG_DIR)
    assert cfg["room"]["door_x"] == 700
    assert cfg["movement"]["speed"] == 5
    assert "_env" in cfg


def test_missing_settings_raise(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path)


def test_non_mapping_settings_raise(tmp_path):
    (tmp_path / "settings.yaml").write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_config(tmp_path)


def test_env_file_overrides_dialogue_path(tmp_path, monkeypatch):
    monkeypatch.delenv("REUNION_DIALOGUES", raising=False)
    dialogues = tmp_path / "lines.yaml"
    dialogues.write_text(
        "act1:\n  opening:\n    chichi:\n      wakeUp:\n        - {speaker: Chichi, text: 'Custom'}\n",
        encoding="utf-8",
    )
    (tmp_path / "settings.yaml").write_text("room:\n  door_x: 600\n", encoding="utf-8")
    (tmp_path / ".env").write_text(f"REUNION_DIALOGUES={dialogues}\n", encoding="utf-8")

    cfg = load_config(tmp_path)
    os.environ.pop("REUNION_DIALOGUES", None)

    game = ReunionGame(cfg)
    game.start_game()
    assert game.current_dialogue_line().text == "Custom"


def test_partial_settings_keep_section_defaults(tmp_path, monkeypatch):
    monkeypatch.delenv("REUNION_DIALOGUES", raising=False)
    (tmp_path / "settings.yaml").write_text("room:\n  door_x: 300\nplayer:\nnpcs:\n  bat: {x: 400}\n", encoding="utf-8")
    cfg = load_config(tmp_path)
    assert cfg["room"]["door_x"] == 300
    assert cfg["room"]["exit_x"] == 750
    assert cfg["movement"]["speed"] == 5
    assert cfg["player"] == {"x": 100, "y": 300, "facing": "right"}
    assert cfg["npcs"]["bat"] == {"x": 400, "y": 250, "visible": True}
    assert cfg["npcs"]["nienie"]["visible"] is False
    assert ReunionGame(cfg).move_speed == 5


def test_non_mapping_section_raises(tmp_path):
    (tmp_path / "settings.yaml").write_text("movement: fast\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_config(tmp_path)


def test_room_settings_move_the_door():
    game = ReunionGame({"room": {"door_x": 300}})
    game.start_game()
    while game.advance_dialogue():
        pass
    game.move_player(250, 0)
    assert game.state.player.position.x == 100


def test_run_command_moves_and_quits():
    game = ReunionGame({})
    game.start_game()
    for _ in range(3):
        run_command(game, "next")
    assert game.current_phase() is ScenePhase.EXPLORATION

    run_command(game, "d 4")
    assert game.state.player.position.x == 120
    assert run_command(game, "quit") is False


def test_cli_plays_opening(monkeypatch):
    monkeypatch.delenv("REUNION_DIALOGUES", raising=False)
    runner = CliRunner()
    result = runner.invoke(main, ["--config-dir", str(CONFIG_DIR)], input="next\nnext\nnext\nstate\nquit\n")
    assert result.exit_code == 0, result.output
    assert "I had that nightmare again..." in result.output
    assert "phase: exploration" in result.output
    assert "hasWokenUp" in result.output


def test_cli_start_act_skips_ahead(monkeypatch):
    monkeypatch.delenv("REUNION_DIALOGUES", raising=False)
    runner = CliRunner()
    result = runner.invoke(main, ["--config-dir", str(CONFIG_DIR), "--start-act", "2"], input="state\n")
    assert result.exit_code == 0, result.output
    assert "Act 2: The Void" in result.output
    assert "phase: entering" in result.output
