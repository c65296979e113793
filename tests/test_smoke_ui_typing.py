from __future__ import annotations

import json
import os
from pathlib import Path


def _key(pygame, key: int, unicode: str = ""):
    return pygame.event.Event(pygame.KEYDOWN, {"key": key, "unicode": unicode, "mod": 0})


def test_ui_smoke_type_a_word_and_record_best(tmp_path: Path) -> None:
    # Headless SDL for CI.
    os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
    os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

    import pygame

    from termotype.app import run
    from termotype.settings import Settings
    from termotype.typing_core import WordCountBound

    words_path = tmp_path / "words.json"
    words_path.write_text(json.dumps(["hello"]), encoding="utf-8")
    profile_path = tmp_path / "profile.json"
    settings = Settings(mode=WordCountBound(1), words_path=words_path, profile_path=profile_path, seed=1)

    def inject(frame: int) -> None:
        # Main Menu -> Typing Test, type "hello", space to finish.
        if frame == 1:
            pygame.event.post(_key(pygame, pygame.K_RETURN))
        elif frame == 2:
            for ch in "hello":
                pygame.event.post(_key(pygame, getattr(pygame, f"K_{ch}"), ch))
        elif frame == 3:
            pygame.event.post(_key(pygame, pygame.K_SPACE, " "))

    assert run(max_frames=8, event_injector=inject, settings=settings) == 0

    payload = json.loads(profile_path.read_text(encoding="utf-8"))
    assert "words:1" in payload["bests"]
    assert payload["bests"]["words:1"]["accuracy"] == 100.0


def test_ui_smoke_options_and_stats(tmp_path: Path) -> None:
    os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
    os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

    import pygame

    from termotype.app import run
    from termotype.settings import Settings

    settings = Settings(words_path=tmp_path / "missing.json", profile_path=tmp_path / "profile.json")

    def inject(frame: int) -> None:
        # Options -> pick a preset; Stats -> back; open and leave a test.
        script = {
            1: pygame.K_DOWN,
            2: pygame.K_DOWN,
            3: pygame.K_RETURN,
            4: pygame.K_DOWN,
            5: pygame.K_RETURN,
            6: pygame.K_UP,
            7: pygame.K_RETURN,
            8: pygame.K_ESCAPE,
            9: pygame.K_UP,
            10: pygame.K_RETURN,
            11: pygame.K_TAB,
            12: pygame.K_ESCAPE,
        }
        key = script.get(frame)
        if key is not None:
            pygame.event.post(_key(pygame, key))

    assert run(max_frames=16, event_injector=inject, settings=settings) == 0
    assert not (tmp_path / "profile.json").exists()


def test_ui_smoke_stats_lists_saved_best(tmp_path: Path) -> None:
    os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
    os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

    import pygame

    from termotype.app import run
    from termotype.settings import Settings

    profile_path = tmp_path / "profile.json"
    best = {"wpm": 72.5, "cpm": 362.5, "accuracy": 97.0, "timestamp": 1_710_504_000}
    profile_path.write_text(json.dumps({"version": 1, "bests": {"time:30": best}}), encoding="utf-8")
    settings = Settings(words_path=tmp_path / "missing.json", profile_path=profile_path)

    def inject(frame: int) -> None:
        script = {1: pygame.K_DOWN, 2: pygame.K_RETURN, 5: pygame.K_ESCAPE}
        key = script.get(frame)
        if key is not None:
            pygame.event.post(_key(pygame, key))

    assert run(max_frames=7, event_injector=inject, settings=settings) == 0
    assert json.loads(profile_path.read_text(encoding="utf-8"))["bests"]["time:30"] == best
