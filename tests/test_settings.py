from __future__ import annotations

from pathlib import Path

from termotype.settings import DEFAULT_MODE, DEFAULT_WORDS_PATH, Settings
from termotype.typing_core import WordCountBound


def test_defaults_from_empty_env() -> None:
    s = Settings.from_env({})
    assert s.mode == DEFAULT_MODE
    assert s.words_path == DEFAULT_WORDS_PATH
    assert s.seed is None
    assert s.log_level == "INFO"


def test_values_from_env(tmp_path: Path) -> None:
    s = Settings.from_env(
        {
            "TERMOTYPE_MODE": "words:50",
            "TERMOTYPE_WORDS_PATH": str(tmp_path / "w.json"),
            "TERMOTYPE_SEED": "42",
            "TERMOTYPE_LOG_LEVEL": "debug",
        }
    )
    assert s.mode == WordCountBound(50)
    assert s.words_path == tmp_path / "w.json"
    assert s.seed == 42
    assert s.log_level == "DEBUG"


def test_invalid_values_fall_back() -> None:
    s = Settings.from_env({"TERMOTYPE_MODE": "laps:3", "TERMOTYPE_SEED": "x", "TERMOTYPE_LOG_LEVEL": "LOUD"})
    assert s.mode == DEFAULT_MODE
    assert s.seed is None
    assert s.log_level == "INFO"


def test_explicit_profile_path_wins(tmp_path: Path) -> None:
    s = Settings(profile_path=tmp_path / "p.json")
    assert s.resolved_profile_path() == tmp_path / "p.json"
