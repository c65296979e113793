"""Deterministic typing-test engine.

``TypingTest`` drives one session at a time through
``IDLE -> RUNNING -> COMPLETED`` (and back to ``IDLE`` on reset). It performs
no I/O: time comes from an injected ``Clock``, words from an injected
``WordSource``, and the outside world only sees frozen ``TypingSnapshot`` and
``SessionResult`` values.

Every call is total: input that makes no sense in the current state is a
no-op that returns ``False``. The only error is ``ConfigurationError``, raised
synchronously when a mode or word source is unusable.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from .clock import Clock
from .errors import ConfigurationError
from .input_tracker import InputTracker, WordProgress
from .metrics import MetricsCalculator, MetricsSnapshot
from .words import FALLBACK_WORDS, RandomWordSource, WordSource, is_valid_word

logger = logging.getLogger(__name__)

# Upcoming words kept prepared in time-bound sessions so they can be displayed.
TIME_MODE_LOOKAHEAD = 12


def _format_number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else f"{value:g}"


@dataclass(frozen=True, slots=True)
class TimeBound:
    duration_s: float

    def __post_init__(self) -> None:
        if isinstance(self.duration_s, bool) or not isinstance(self.duration_s, (int, float)):
            raise ConfigurationError("duration_s must be a number")
        if not math.isfinite(self.duration_s) or self.duration_s <= 0:
            raise ConfigurationError("duration_s must be > 0")

    @property
    def key(self) -> str:
        return f"time:{_format_number(self.duration_s)}"

    @property
    def label(self) -> str:
        return f"{_format_number(self.duration_s)} seconds"


@dataclass(frozen=True, slots=True)
class WordCountBound:
    count: int

    def __post_init__(self) -> None:
        if isinstance(self.count, bool) or not isinstance(self.count, int):
            raise ConfigurationError("count must be an integer")
        if self.count <= 0:
            raise ConfigurationError("count must be > 0")

    @property
    def key(self) -> str:
        return f"words:{self.count}"

    @property
    def label(self) -> str:
        return f"{self.count} words"


TestMode = TimeBound | WordCountBound


def parse_mode(text: str) -> TestMode:
    """Parse ``"time:30"`` or ``"words:50"`` into a mode."""

    kind, sep, value = str(text).strip().lower().partition(":")
    if sep == "" or kind not in ("time", "words"):
        raise ConfigurationError(f"invalid mode {text!r}; expected time:N or words:N")
    try:
        number = float(value) if kind == "time" else int(value)
    except ValueError as exc:
        raise ConfigurationError(f"invalid mode {text!r}: {exc}") from exc
    if kind == "time":
        return TimeBound(number)
    return WordCountBound(int(number))


class Status(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"


class KeyKind(str, Enum):
    CHAR = "char"
    SPACE = "space"
    BACKSPACE = "backspace"


@dataclass(frozen=True, slots=True)
class Keystroke:
    kind: KeyKind
    char: str = ""

    @classmethod
    def from_text(cls, text: str) -> "Keystroke":
        if len(text) != 1:
            raise ValueError("keystroke text must be a single character")
        if text == " ":
            return cls(KeyKind.SPACE, " ")
        if text in ("\b", "\x7f"):
            return cls(KeyKind.BACKSPACE)
        return cls(KeyKind.CHAR, text)


SPACE = Keystroke(KeyKind.SPACE, " ")
BACKSPACE = Keystroke(KeyKind.BACKSPACE)


@dataclass(frozen=True, slots=True)
class SessionResult:
    mode: TestMode
    metrics: MetricsSnapshot
    started_at_s: float
    completed_at_s: float
    words_completed: int


@dataclass(frozen=True, slots=True)
class TypingSnapshot:
    """View model for the UI (pure data)."""

    status: Status
    mode: TestMode | None
    words: tuple[WordProgress, ...]
    word_index: int
    char_index: int
    metrics: MetricsSnapshot
    time_remaining_s: float | None
    words_remaining: int | None


@dataclass(slots=True)
class _Session:
    tracker: InputTracker
    start_s: float | None = None
    final: MetricsSnapshot | None = None


_ZERO_METRICS = MetricsCalculator.from_counts(correct_chars=0, incorrect_chars=0, elapsed_s=0.0)


class TypingTest:
    """State machine for a single typing session.

    - Time is entirely via injected Clock.
    - Words are pulled from the injected WordSource: all up front for
      WordCountBound, lazily (with a small look-ahead) for TimeBound.
    """

    def __init__(
        self,
        *,
        word_source: WordSource,
        clock: Clock,
        mode: TestMode | None = None,
        lookahead: int = TIME_MODE_LOOKAHEAD,
    ) -> None:
        if lookahead < 1:
            raise ValueError("lookahead must be >= 1")
        self._source = word_source
        self._clock = clock
        self._lookahead = int(lookahead)
        self._calculator = MetricsCalculator()

        self._mode: TestMode | None = None
        self._session: _Session | None = None
        self._status = Status.IDLE
        self._result: SessionResult | None = None
        self._last_tick_s: float | None = None

        if mode is not None:
            self.configure(mode)

    @property
    def status(self) -> Status:
        return self._status

    @property
    def mode(self) -> TestMode | None:
        return self._mode

    @property
    def start_s(self) -> float | None:
        return None if self._session is None else self._session.start_s

    def configure(self, mode: TestMode) -> bool:
        """Select the mode for the next session. Only honoured while IDLE."""

        if self._status is not Status.IDLE:
            return False
        if not isinstance(mode, (TimeBound, WordCountBound)):
            raise ConfigurationError(f"unsupported test mode: {mode!r}")
        session = self._new_session(mode)
        self._mode = mode
        self._session = session
        logger.debug("Configured %s", mode.key)
        return True

    def start_or_advance(self, key: Keystroke | str) -> bool:
        """Feed one keystroke. Returns True if it changed the session."""

        keystroke = _coerce_keystroke(key)
        if keystroke is None or self._session is None:
            return False
        if self._status is Status.COMPLETED:
            return False

        now = self._clock.now()
        if self._status is Status.IDLE:
            if keystroke.kind is not KeyKind.CHAR:
                return False
            self._session.start_s = now
            self._status = Status.RUNNING
            logger.debug("Session started")
        elif self._check_completion(now):
            # Deadline passed before this keystroke arrived.
            return False

        changed = self._apply(keystroke)
        self._check_completion(now)
        return changed

    def tick(self, now: float | None = None) -> MetricsSnapshot:
        """Re-derive live metrics and evaluate completion at ``now``."""

        if now is None:
            now = self._clock.now()
        self._last_tick_s = now
        self._check_completion(now)
        return self.metrics(now)

    def reset(self) -> None:
        """Discard the session and prepare a fresh one with the same mode.

        If the word source fails, the engine is left IDLE with no session and
        the ``ConfigurationError`` propagates.
        """

        self._result = None
        self._status = Status.IDLE
        self._session = None
        self._last_tick_s = None
        if self._mode is not None:
            self._session = self._new_session(self._mode)
        logger.debug("Session reset")

    def take_result(self) -> SessionResult | None:
        """Return the finished session's result once; None afterwards."""

        result = self._result
        self._result = None
        return result

    def metrics(self, now: float | None = None) -> MetricsSnapshot:
        session = self._session
        if session is None or session.start_s is None:
            return _ZERO_METRICS
        if session.final is not None:
            return session.final
        if now is None:
            now = self._clock.now()
        return self._calculator.snapshot(session.tracker, self._elapsed(session, now))

    def time_remaining_s(self, now: float | None = None) -> float | None:
        mode = self._mode
        if not isinstance(mode, TimeBound):
            return None
        session = self._session
        if self._status is Status.COMPLETED:
            return 0.0
        if session is None or session.start_s is None:
            return float(mode.duration_s)
        if now is None:
            now = self._clock.now()
        return max(0.0, mode.duration_s - self._elapsed(session, now))

    def words_remaining(self) -> int | None:
        mode = self._mode
        if not isinstance(mode, WordCountBound) or self._session is None:
            return None
        return max(0, mode.count - self._session.tracker.words_committed)

    def snapshot(self, now: float | None = None) -> TypingSnapshot:
        """View of the session at ``now``; defaults to the last ``tick()`` time."""

        if now is None:
            now = self._clock.now() if self._last_tick_s is None else self._last_tick_s
        session = self._session
        if session is None:
            words: tuple[WordProgress, ...] = ()
            word_index = 0
            char_index = 0
        else:
            words = session.tracker.words()
            word_index = session.tracker.word_index
            char_index = session.tracker.char_index
        return TypingSnapshot(
            status=self._status,
            mode=self._mode,
            words=words,
            word_index=word_index,
            char_index=char_index,
            metrics=self.metrics(now),
            time_remaining_s=self.time_remaining_s(now),
            words_remaining=self.words_remaining(),
        )

    def _apply(self, keystroke: Keystroke) -> bool:
        assert self._session is not None
        tracker = self._session.tracker
        if keystroke.kind is KeyKind.SPACE:
            return tracker.accept_space()
        if keystroke.kind is KeyKind.BACKSPACE:
            return tracker.accept_backspace()
        return tracker.accept_char(keystroke.char)

    def _check_completion(self, now: float) -> bool:
        if self._status is not Status.RUNNING:
            return self._status is Status.COMPLETED
        session = self._session
        assert session is not None and session.start_s is not None
        mode = self._mode
        if isinstance(mode, TimeBound):
            done = now - session.start_s >= mode.duration_s
        else:
            done = session.tracker.is_finished
        if done:
            self._complete(now)
        return done

    def _complete(self, now: float) -> None:
        session = self._session
        mode = self._mode
        assert session is not None and session.start_s is not None and mode is not None
        final = self._calculator.snapshot(session.tracker, self._elapsed(session, now))
        session.final = final
        self._status = Status.COMPLETED
        self._result = SessionResult(
            mode=mode,
            metrics=final,
            started_at_s=session.start_s,
            completed_at_s=now,
            words_completed=session.tracker.words_committed,
        )
        logger.debug(
            "Session completed (%s): %.1f wpm, %.1f%% accuracy",
            mode.key,
            final.wpm,
            final.accuracy,
        )

    def _elapsed(self, session: _Session, now: float) -> float:
        assert session.start_s is not None
        elapsed = max(0.0, now - session.start_s)
        if isinstance(self._mode, TimeBound):
            elapsed = min(elapsed, float(self._mode.duration_s))
        return elapsed

    def _new_session(self, mode: TestMode) -> _Session:
        if isinstance(mode, WordCountBound):
            words = [self._fetch_word() for _ in range(mode.count)]
            return _Session(tracker=InputTracker(words, fixed_length=True))

        def refill() -> None:
            while tracker.word_count - tracker.word_index < self._lookahead:
                tracker.append_word(self._fetch_word())

        tracker = InputTracker(on_word_committed=refill)
        refill()
        return _Session(tracker=tracker)

    def _fetch_word(self) -> str:
        word = self._source.next_word()
        if not is_valid_word(word):
            raise ConfigurationError(f"word source returned an unusable word: {word!r}")
        return word


def _coerce_keystroke(key: object) -> Keystroke | None:
    if isinstance(key, Keystroke):
        if key.kind is KeyKind.CHAR and len(key.char) != 1:
            return None
        return key
    if isinstance(key, str) and len(key) == 1:
        return Keystroke.from_text(key)
    return None


def build_typing_test(
    *,
    clock: Clock,
    mode: TestMode,
    words: Sequence[str] | None = None,
    seed: int | None = None,
) -> TypingTest:
    """Typing test over a seeded random sample of ``words`` (built-in list by default)."""

    source = RandomWordSource(FALLBACK_WORDS if words is None else words, seed=seed)
    return TypingTest(word_source=source, clock=clock, mode=mode)
