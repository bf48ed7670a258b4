from pathlib import Path

import pytest

import mancala.config as C
from mancala.config import Settings, load_settings, read_config_file
from mancala.errors import ParseError


@pytest.fixture(autouse=True)
def no_user_config(tmp_path: Path, monkeypatch):
    monkeypatch.setattr(C, "user_config_file", lambda: tmp_path / "absent.yaml")


def write(tmp_path: Path, text: str) -> Path:
    p = tmp_path / "mancala.yaml"
    p.write_text(text, encoding="utf-8")
    return p


def test_defaults():
    s = load_settings(env={})
    assert s == Settings()
    assert s.board().width == 6
    assert s.board().stones == 4


def test_yaml_file_sections(tmp_path: Path):
    p = write(
        tmp_path,
        "game:\n  width: 3\n  stones: 2\n"
        "generator:\n  filename: out.txt\n"
        "player:\n  type: random\n  name: alice\n"
        "show:\n  delta: true\n",
    )
    s = load_settings(path=p, env={})
    assert (s.width, s.stones) == (3, 2)
    assert s.filename == "out.txt"
    assert s.strategy == "random"
    assert s.name == "alice"
    assert s.show_delta is True


def test_environment_beats_file_and_flags_beat_environment(tmp_path: Path):
    p = write(tmp_path, "game:\n  width: 3\n  stones: 2\n")
    env = {"MANCALA_WIDTH": "5", "MANCALA_PLAYER_NAME": "bob"}
    s = load_settings(path=p, env=env)
    assert (s.width, s.stones, s.name) == (5, 2, "bob")
    s = load_settings(path=p, env=env, overrides={"width": 4, "stones": None, "name": "eve"})
    assert (s.width, s.stones, s.name) == (4, 2, "eve")


def test_config_from_environment_variable(tmp_path: Path):
    p = write(tmp_path, "game:\n  stones: 1\n")
    assert load_settings(env={"MANCALA_CONFIG": str(p)}).stones == 1


def test_user_config_file_is_used_when_present(tmp_path: Path, monkeypatch):
    p = write(tmp_path, "player:\n  type: random\n")
    monkeypatch.setattr(C, "user_config_file", lambda: p)
    assert load_settings(env={}).strategy == "random"


def test_missing_explicit_file(tmp_path: Path):
    with pytest.raises(ParseError):
        load_settings(path=tmp_path / "nope.yaml", env={})
    with pytest.raises(ParseError):
        load_settings(env={"MANCALA_CONFIG": str(tmp_path / "nope.yaml")})


@pytest.mark.parametrize(
    "text",
    ["game:\n  width: six\n", "game:\n  width: true\n", "- a\n- b\n", "game: [1\n"],
)
def test_bad_files(tmp_path: Path, text: str):
    with pytest.raises(ParseError):
        read_config_file(write(tmp_path, text))


def test_bad_environment_value():
    with pytest.raises(ParseError):
        load_settings(env={"MANCALA_STONES": "many"})


def test_empty_environment_values_are_ignored():
    assert load_settings(env={"MANCALA_WIDTH": ""}).width == 6
