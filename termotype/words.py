"""Word sources for the typing test.

The engine only ever calls ``next_word()``; where the words come from is up to
the source. ``load_words`` reads a JSON array of strings from disk and falls
back to a built-in list so the app always has something to type.
"""

from __future__ import annotations

import json
import logging
import random
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Protocol

from .errors import ConfigurationError

logger = logging.getLogger(__name__)


class WordSource(Protocol):
    """Ordered, effectively unbounded supply of words."""

    def next_word(self) -> str:
        ...


FALLBACK_WORDS: tuple[str, ...] = (
    "the", "be", "of", "and", "a", "to", "in", "he", "have", "it",
    "that", "for", "they", "with", "as", "not", "on", "she", "at", "by",
    "this", "we", "you", "do", "but", "from", "or", "which", "one", "would",
    "all", "will", "there", "say", "who", "make", "when", "can", "more", "if",
    "no", "man", "out", "other", "so", "what", "time", "up", "go", "about",
    "than", "into", "could", "state", "only", "new", "year", "some", "take", "come",
    "these", "know", "see", "use", "get", "like", "then", "first", "any", "work",
    "now", "may", "such", "give", "over", "think", "most", "even", "find", "day",
    "also", "after", "way", "many", "must", "look", "before", "great", "back", "through",
    "long", "where", "much", "should", "well", "people", "down", "own", "just", "because",
    "good", "each", "those", "feel", "seem", "how", "high", "too", "place", "little",
    "world", "very", "still", "nation", "hand", "old", "life", "tell", "write", "become",
    "here", "show", "house", "both", "between", "need", "mean", "call", "develop", "under",
    "last", "right", "move", "thing", "general", "school", "never", "same", "another", "begin",
    "while", "number", "part", "turn", "real", "leave", "might", "want", "point", "form",
    "off", "child", "few", "small", "since", "against", "ask", "late", "home", "interest",
    "large", "person", "end", "open", "public", "follow", "during", "present", "without", "again",
    "hold", "govern", "around", "possible", "head", "consider", "word", "program", "problem", "however",
)


def is_valid_word(word: object) -> bool:
    return isinstance(word, str) and word != "" and not any(ch.isspace() for ch in word)


def clean_words(raw: Iterable[object]) -> list[str]:
    """Strip entries and drop anything that is not a usable single word."""

    out: list[str] = []
    for item in raw:
        if not isinstance(item, str):
            continue
        word = item.strip()
        if is_valid_word(word):
            out.append(word)
    return out


def load_words_from_file(path: Path) -> list[str]:
    """Load a JSON array of words. Raises on any problem with the file."""

    payload = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(payload, list):
        raise ConfigurationError(f"{path}: expected a JSON array of words")
    words = clean_words(payload)
    if not words:
        raise ConfigurationError(f"{path}: word list is empty")
    return words


def load_words(path: Path | None) -> list[str]:
    """Load words from ``path``, falling back to ``FALLBACK_WORDS``."""

    if path is None:
        return list(FALLBACK_WORDS)
    try:
        return load_words_from_file(path)
    except FileNotFoundError:
        logger.info("Word list %s not found; using built-in words", path)
    except (OSError, ValueError) as exc:
        # json.JSONDecodeError and ConfigurationError are both ValueErrors.
        logger.warning("Could not load word list %s (%s); using built-in words", path, exc)
    return list(FALLBACK_WORDS)


class SequenceWordSource:
    """Cycles through a fixed list of words in order."""

    def __init__(self, words: Sequence[str]) -> None:
        self._words = list(words)
        if not self._words:
            raise ConfigurationError("word source is empty")
        self._index = 0

    def next_word(self) -> str:
        word = self._words[self._index % len(self._words)]
        self._index += 1
        return word


class RandomWordSource:
    """Uniform sampling (with replacement) from a vocabulary.

    Deterministic for a given seed.
    """

    def __init__(self, vocabulary: Sequence[str], *, seed: int | None = None) -> None:
        self._vocabulary = clean_words(vocabulary)
        if not self._vocabulary:
            raise ConfigurationError("word source is empty")
        self._rng = random.Random(seed)

    def next_word(self) -> str:
        return self._rng.choice(self._vocabulary)
