"""Speed and accuracy metrics.

Standard typing-test conventions: a "word" is five characters, and only
correctly typed characters count towards speed. Live metrics are recomputed
from the cumulative session state every tick; there is no decaying window.
"""

from __future__ import annotations

from dataclasses import dataclass

from .input_tracker import InputTracker

CHARS_PER_WORD = 5.0

# Below this, speed is reported as 0.0 instead of dividing by ~zero.
MIN_ELAPSED_S = 1e-6


@dataclass(frozen=True, slots=True)
class MetricsSnapshot:
    wpm: float
    cpm: float
    accuracy: float
    elapsed_s: float
    correct_chars: int
    incorrect_chars: int

    @property
    def judged_chars(self) -> int:
        return self.correct_chars + self.incorrect_chars


def calculate_wpm(correct_chars: int, elapsed_s: float) -> float:
    if elapsed_s < MIN_ELAPSED_S:
        return 0.0
    return (correct_chars / CHARS_PER_WORD) / (elapsed_s / 60.0)


def calculate_cpm(correct_chars: int, elapsed_s: float) -> float:
    if elapsed_s < MIN_ELAPSED_S:
        return 0.0
    return correct_chars / (elapsed_s / 60.0)


def calculate_accuracy(correct_chars: int, incorrect_chars: int) -> float:
    """Percentage of judged characters that are correct, in [0, 100]."""

    return 100.0 * correct_chars / max(1, correct_chars + incorrect_chars)


class MetricsCalculator:
    """Derives a MetricsSnapshot from tracker state and elapsed time."""

    @staticmethod
    def from_counts(*, correct_chars: int, incorrect_chars: int, elapsed_s: float) -> MetricsSnapshot:
        elapsed_s = max(0.0, float(elapsed_s))
        return MetricsSnapshot(
            wpm=calculate_wpm(correct_chars, elapsed_s),
            cpm=calculate_cpm(correct_chars, elapsed_s),
            accuracy=calculate_accuracy(correct_chars, incorrect_chars),
            elapsed_s=elapsed_s,
            correct_chars=int(correct_chars),
            incorrect_chars=int(incorrect_chars),
        )

    def snapshot(self, tracker: InputTracker, elapsed_s: float) -> MetricsSnapshot:
        return self.from_counts(
            correct_chars=tracker.correct_chars,
            incorrect_chars=tracker.incorrect_chars,
            elapsed_s=elapsed_s,
        )
