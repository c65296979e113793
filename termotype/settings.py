from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from .errors import ConfigurationError
from .profile import ProfileStore
from .typing_core import TestMode, TimeBound, WordCountBound, parse_mode

logger = logging.getLogger(__name__)

MODE_ENV = "TERMOTYPE_MODE"
WORDS_PATH_ENV = "TERMOTYPE_WORDS_PATH"
SEED_ENV = "TERMOTYPE_SEED"
LOG_LEVEL_ENV = "TERMOTYPE_LOG_LEVEL"

DEFAULT_MODE: TestMode = TimeBound(30)
DEFAULT_WORDS_PATH = Path("words.json")

MODE_PRESETS: tuple[TestMode, ...] = (
    TimeBound(15),
    TimeBound(30),
    TimeBound(60),
    WordCountBound(10),
    WordCountBound(30),
    WordCountBound(50),
)


@dataclass(frozen=True, slots=True)
class Settings:
    mode: TestMode = DEFAULT_MODE
    words_path: Path = DEFAULT_WORDS_PATH
    profile_path: Path | None = None
    seed: int | None = None
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> "Settings":
        env = os.environ if environ is None else environ

        mode = DEFAULT_MODE
        raw_mode = env.get(MODE_ENV, "").strip()
        if raw_mode:
            try:
                mode = parse_mode(raw_mode)
            except ConfigurationError as exc:
                logger.warning("Ignoring %s=%r: %s", MODE_ENV, raw_mode, exc)

        seed: int | None = None
        raw_seed = env.get(SEED_ENV, "").strip()
        if raw_seed:
            try:
                seed = int(raw_seed)
            except ValueError:
                logger.warning("Ignoring %s=%r: not an integer", SEED_ENV, raw_seed)

        raw_words = env.get(WORDS_PATH_ENV, "").strip()
        words_path = Path(raw_words).expanduser() if raw_words else DEFAULT_WORDS_PATH

        log_level = env.get(LOG_LEVEL_ENV, "").strip().upper() or "INFO"
        if not isinstance(logging.getLevelName(log_level), int):
            log_level = "INFO"

        return cls(mode=mode, words_path=words_path, profile_path=None, seed=seed, log_level=log_level)

    def resolved_profile_path(self) -> Path:
        return self.profile_path if self.profile_path is not None else ProfileStore.default_path()
