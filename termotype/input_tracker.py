"""Character-level input validation for a typing session.

Every word owns one slot per character plus a trailing boundary slot (the
space that separates it from the next word). Keystrokes are validated
positionally against the target text: there is no edit-distance alignment,
so a space pressed before the word is fully typed is ignored.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import Enum


class CharState(str, Enum):
    UNTYPED = "untyped"
    CORRECT = "correct"
    INCORRECT = "incorrect"


@dataclass(frozen=True, slots=True)
class WordProgress:
    """Read-only view of one word and its slot states (boundary slot last)."""

    text: str
    states: tuple[CharState, ...]

    @property
    def is_committed(self) -> bool:
        return self.states[-1] is not CharState.UNTYPED

    @property
    def has_errors(self) -> bool:
        return CharState.INCORRECT in self.states


class InputTracker:
    """Owns per-character correctness for the words of one session."""

    def __init__(
        self,
        words: Iterable[str] = (),
        *,
        fixed_length: bool = False,
        on_word_committed: Callable[[], None] | None = None,
    ) -> None:
        self._words: list[str] = []
        self._states: list[list[CharState]] = []
        self._word_index = 0
        self._char_index = 0
        self._correct = 0
        self._incorrect = 0
        self._fixed_length = fixed_length
        self._on_word_committed = on_word_committed
        for word in words:
            self.append_word(word)

    @property
    def word_index(self) -> int:
        return self._word_index

    @property
    def char_index(self) -> int:
        return self._char_index

    @property
    def correct_chars(self) -> int:
        return self._correct

    @property
    def incorrect_chars(self) -> int:
        return self._incorrect

    @property
    def judged_chars(self) -> int:
        return self._correct + self._incorrect

    @property
    def word_count(self) -> int:
        return len(self._words)

    @property
    def words_committed(self) -> int:
        return self._word_index

    @property
    def is_finished(self) -> bool:
        """True once every word of a fixed-length session has been committed."""

        return self._fixed_length and self._word_index >= len(self._words)

    def current_word(self) -> str | None:
        if self._word_index >= len(self._words):
            return None
        return self._words[self._word_index]

    def expected_char(self) -> str | None:
        """Character expected at the cursor; ``" "`` at the boundary slot."""

        word = self.current_word()
        if word is None:
            return None
        if self._char_index == len(word):
            return " "
        return word[self._char_index]

    def append_word(self, word: str) -> None:
        self._words.append(word)
        self._states.append([CharState.UNTYPED] * (len(word) + 1))

    def accept_char(self, ch: str) -> bool:
        word = self.current_word()
        if word is None:
            return False
        if self._char_index >= len(word):
            # At the boundary slot only a space is accepted.
            return False
        state = CharState.CORRECT if ch == word[self._char_index] else CharState.INCORRECT
        self._judge(self._char_index, state)
        self._char_index += 1
        return True

    def accept_backspace(self) -> bool:
        if self.current_word() is None or self._char_index == 0:
            return False
        self._char_index -= 1
        self._unjudge(self._char_index)
        return True

    def accept_space(self) -> bool:
        word = self.current_word()
        if word is None or self._char_index != len(word):
            return False
        self._judge(self._char_index, CharState.CORRECT)
        self._word_index += 1
        self._char_index = 0
        if self._on_word_committed is not None:
            self._on_word_committed()
        return True

    def words(self) -> tuple[WordProgress, ...]:
        return tuple(self.word_progress(i) for i in range(len(self._words)))

    def word_progress(self, index: int) -> WordProgress:
        return WordProgress(text=self._words[index], states=tuple(self._states[index]))

    def _judge(self, slot: int, state: CharState) -> None:
        states = self._states[self._word_index]
        assert states[slot] is CharState.UNTYPED
        states[slot] = state
        if state is CharState.CORRECT:
            self._correct += 1
        else:
            self._incorrect += 1

    def _unjudge(self, slot: int) -> None:
        states = self._states[self._word_index]
        prev = states[slot]
        states[slot] = CharState.UNTYPED
        if prev is CharState.CORRECT:
            self._correct -= 1
        elif prev is CharState.INCORRECT:
            self._incorrect -= 1
