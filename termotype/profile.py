from __future__ import annotations

import json
import logging
import os
import sys
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .typing_core import SessionResult, TestMode

logger = logging.getLogger(__name__)

PROFILE_STORE_ENV = "TERMOTYPE_PROFILE_PATH"


def _as_float(value: object, fallback: float) -> float:
    try:
        return float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return fallback


@dataclass(frozen=True, slots=True)
class BestScore:
    wpm: float
    cpm: float
    accuracy: float
    timestamp: int  # Unix seconds

    def is_better_than(self, other: "BestScore") -> bool:
        return self.wpm > other.wpm

    def date_label(self) -> str:
        """Local date the score was set, or ``"-"`` when unknown."""

        if self.timestamp <= 0:
            return "-"
        return time.strftime("%Y-%m-%d", time.localtime(self.timestamp))

    @classmethod
    def from_result(cls, result: SessionResult, *, timestamp: int | None = None) -> "BestScore":
        m = result.metrics
        return cls(
            wpm=float(m.wpm),
            cpm=float(m.cpm),
            accuracy=float(m.accuracy),
            timestamp=int(time.time()) if timestamp is None else int(timestamp),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "wpm": float(self.wpm),
            "cpm": float(self.cpm),
            "accuracy": float(self.accuracy),
            "timestamp": int(self.timestamp),
        }

    @classmethod
    def from_dict(cls, data: object) -> "BestScore | None":
        if not isinstance(data, dict):
            return None
        wpm = _as_float(data.get("wpm"), -1.0)
        if wpm < 0.0:
            return None
        return cls(
            wpm=wpm,
            cpm=max(0.0, _as_float(data.get("cpm"), 0.0)),
            accuracy=min(100.0, max(0.0, _as_float(data.get("accuracy"), 0.0))),
            timestamp=int(_as_float(data.get("timestamp"), 0.0)),
        )


@dataclass(slots=True)
class Profile:
    """Best score per test mode, keyed by ``TestMode.key``."""

    bests: dict[str, BestScore] = field(default_factory=dict)

    def best_for(self, mode: TestMode) -> BestScore | None:
        return self.bests.get(mode.key)

    def update_score(self, mode: TestMode, score: BestScore) -> bool:
        """Store ``score`` if it beats the current best. Returns True if it did."""

        current = self.bests.get(mode.key)
        if current is not None and not score.is_better_than(current):
            return False
        self.bests[mode.key] = score
        return True


class ProfileStore:
    _version = 1

    def __init__(self, path: Path) -> None:
        self._path = path
        self._profile = Profile()
        self._load()

    @classmethod
    def default_path(cls) -> Path:
        explicit = os.environ.get(PROFILE_STORE_ENV)
        if explicit:
            return Path(explicit).expanduser()
        if sys.platform.startswith("win") and os.environ.get("APPDATA"):
            return Path(os.environ["APPDATA"]) / "termotype" / "profile.json"
        return Path.home() / ".config" / "termotype" / "profile.json"

    @property
    def path(self) -> Path:
        return self._path

    def best_for(self, mode: TestMode) -> BestScore | None:
        return self._profile.best_for(mode)

    def bests(self) -> dict[str, BestScore]:
        return dict(self._profile.bests)

    def record(self, result: SessionResult, *, timestamp: int | None = None) -> bool:
        """Update the profile from a finished session. Returns True on a new best."""

        score = BestScore.from_result(result, timestamp=timestamp)
        if not self._profile.update_score(result.mode, score):
            return False
        logger.info("New personal best for %s: %.1f wpm", result.mode.key, score.wpm)
        self.save()
        return True

    def _load(self) -> None:
        if not self._path.exists():
            return
        try:
            payload = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable profile %s: %s", self._path, exc)
            return
        if not isinstance(payload, dict):
            logger.warning("Ignoring malformed profile %s", self._path)
            return

        raw_bests = payload.get("bests")
        if not isinstance(raw_bests, dict):
            return

        bests: dict[str, BestScore] = {}
        for key, item in raw_bests.items():
            score = BestScore.from_dict(item)
            if score is None:
                continue
            bests[str(key)] = score
        self._profile = Profile(bests=bests)

    def save(self) -> bool:
        payload = {
            "version": self._version,
            "bests": {key: score.to_dict() for key, score in sorted(self._profile.bests.items())},
        }
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self._path.with_suffix(f"{self._path.suffix}.tmp")
            tmp_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
            tmp_path.replace(self._path)
        except OSError as exc:
            logger.warning("Could not save profile to %s: %s", self._path, exc)
            return False
        return True
