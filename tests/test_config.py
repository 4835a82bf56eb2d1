"""Tests for settings loading."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from lms_assess.config import load_settings
from lms_assess.config.loader import OVERRIDES_ENV_VAR, merge_dicts


@pytest.fixture(autouse=True)
def clear_overrides(monkeypatch):
    monkeypatch.delenv(OVERRIDES_ENV_VAR, raising=False)


def write_config(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "settings.yaml"
    path.write_text(text, encoding="utf-8")
    return path


def test_explicit_yaml_is_loaded(tmp_path):
    path = write_config(
        tmp_path,
        "paths:\n  results_db: /tmp/grades.sqlite\nlogging:\n  level: debug\nleaderboard:\n  overall_limit: 5\n",
    )
    settings = load_settings(path)
    assert settings.paths.results_db == Path("/tmp/grades.sqlite")
    assert settings.logging.level == "DEBUG"
    assert settings.leaderboard.overall_limit == 5
    assert settings.leaderboard.medal_positions == 3


def test_blank_yaml_gives_defaults(tmp_path):
    settings = load_settings(write_config(tmp_path, ""))
    assert settings.paths.results_db == Path("data/results.sqlite")
    assert settings.logging.use_json is False


def test_missing_default_file_falls_back_to_defaults(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert load_settings().leaderboard.overall_limit == 10


def test_missing_explicit_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_settings(tmp_path / "nope.yaml")


def test_env_overrides_are_merged(tmp_path, monkeypatch):
    path = write_config(tmp_path, "logging:\n  level: INFO\n  use_json: false\n")
    monkeypatch.setenv(OVERRIDES_ENV_VAR, json.dumps({"logging": {"use_json": True}}))
    settings = load_settings(path)
    assert settings.logging.use_json is True
    assert settings.logging.level == "INFO"


def test_invalid_override_json_raises(tmp_path, monkeypatch):
    monkeypatch.setenv(OVERRIDES_ENV_VAR, "{not json")
    with pytest.raises(ValueError):
        load_settings(write_config(tmp_path, ""))


@pytest.mark.parametrize(
    "text",
    ["logging:\n  level: LOUD\n", "leaderboard:\n  overall_limit: 0\n", "leaderboard:\n  medal_positions: 4\n"],
)
def test_invalid_values_raise_value_error(tmp_path, text):
    with pytest.raises(ValueError, match="Invalid configuration"):
        load_settings(write_config(tmp_path, text))


def test_merge_dicts_is_recursive():
    base = {"a": {"x": 1, "y": 2}, "b": 1}
    assert merge_dicts(base, {"a": {"y": 3}, "c": 4}) == {"a": {"x": 1, "y": 3}, "b": 1, "c": 4}
    assert base == {"a": {"x": 1, "y": 2}, "b": 1}


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
